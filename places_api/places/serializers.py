"""
DRF serializers for the places app.
"""

from rest_framework import serializers

from .models import LANGUAGE_FIELDS, MinPlace, Place


class MinPlaceSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for the lightweight list projection.
    """

    class Meta:
        model = MinPlace
        fields = [
            "code",
            "name",
            "province",
            "country",
            "coordinates",
            "tag",
            "image",
            "level",
            "web",
            "phone",
        ]
        read_only_fields = fields


class PlaceSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for a full place record.
    """

    class Meta:
        model = Place
        fields = [
            "code",
            "sources",
            "name",
            *LANGUAGE_FIELDS,
            "level",
            "coordinates",
            "province",
            "country",
            "tag",
            "image",
            "web",
            "phone",
        ]
        read_only_fields = fields

    def to_representation(self, instance: Place) -> dict:
        """
        Add the coordinates split into numbers when they parse.
        """
        data = super().to_representation(instance)

        latitude, longitude = None, None
        parts = (instance.coordinates or "").split(",")
        if len(parts) == 2:
            try:
                latitude, longitude = float(parts[0]), float(parts[1])
            except ValueError:
                pass
        data["location"] = {"latitude": latitude, "longitude": longitude}

        return data


class PlaceUploadSerializer(serializers.Serializer):
    file = serializers.FileField(allow_empty_file=True)
