"""
DRF views for the places app.
"""

import logging

from django.conf import settings
from django.db.models import QuerySet
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response

from .models import MinPlace, Place
from .serializers import MinPlaceSerializer, PlaceSerializer, PlaceUploadSerializer
from .services import DecodeError, SchemaError, StorageError, delete_place, ingest_places

logger = logging.getLogger(__name__)


class PlaceViewSet(
    mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet
):
    """
    ViewSet for places.

    - list: min_places rows, filterable by country, province, tag and level
    - retrieve: the full place for a code
    - create: bulk CSV upload (multipart field "file")
    - destroy: remove a code from both tables
    """

    lookup_field = "code"
    lookup_value_regex = "[^/]+"
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get_queryset(self) -> QuerySet:
        if self.action == "list":
            return self._apply_filters(MinPlace.objects.all())
        return Place.objects.all()

    def get_serializer_class(self):
        if self.action == "list":
            return MinPlaceSerializer
        if self.action == "create":
            return PlaceUploadSerializer
        return PlaceSerializer

    def _apply_filters(self, queryset: QuerySet) -> QuerySet:
        """
        Apply exact-match filters from query parameters.
        """
        params = self.request.query_params

        for field in ("country", "province", "tag"):
            value = params.get(field)
            if value:
                queryset = queryset.filter(**{field: value})

        level = params.get("level")
        if level:
            try:
                queryset = queryset.filter(level=int(level))
            except (ValueError, TypeError):
                # Invalid level format, return empty queryset
                queryset = queryset.none()

        return queryset

    def create(self, request: Request, *args, **kwargs) -> Response:
        """
        Ingest a `;`-delimited CSV of places.

        201 with a summary, 400 when the file is missing or malformed,
        413 when it is too large, 500 when a batch could not be stored.
        """
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Please upload a CSV file."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        upload = serializer.validated_data["file"]
        max_bytes = settings.PLACES_MAX_UPLOAD_BYTES
        if upload.size > max_bytes:
            return Response(
                {"error": f"File too large. Max is {max_bytes} bytes."},
                status=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )

        payload = upload.read()
        logger.info(f"Received places upload {upload.name} ({len(payload)} bytes)")

        try:
            report = ingest_places(
                payload,
                batch_size=settings.PLACES_UPLOAD_BATCH_SIZE,
                source=upload.name,
            )
        except (DecodeError, SchemaError) as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except StorageError as e:
            logger.error(f"Places upload {upload.name} failed: {e}")
            return Response(
                {"error": "Failed to process data"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(report.to_response(), status=status.HTTP_201_CREATED)

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        code = kwargs[self.lookup_field]
        if not delete_place(code):
            raise NotFound(f"Place {code} not found.")
        return Response(status=status.HTTP_204_NO_CONTENT)
