"""
Models for the places app.

`Place` is the full record. `MinPlace` is a denormalized projection of it
used by list queries that do not need the sixteen translated text columns.
Both tables are keyed by the same `code` and are always written together.
"""

from django.db import models

LANGUAGE_FIELDS = (
    "english_text",
    "spanish_text",
    "chinese_text",
    "german_text",
    "french_text",
    "russian_text",
    "portuguese_text",
    "italian_text",
    "hindi_text",
    "arab_text",
    "turkish_text",
    "japanese_text",
    "romanian_text",
    "polish_text",
    "czech_text",
    "indonesian_text",
)

# Columns copied from Place into MinPlace, in min_places column order
SHARED_FIELDS = (
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
)


class Place(models.Model):
    """
    A point of interest with its multilingual descriptions.
    """

    code = models.CharField(max_length=50, primary_key=True)
    sources = models.TextField()
    name = models.TextField()

    english_text = models.TextField()
    spanish_text = models.TextField()
    chinese_text = models.TextField()
    german_text = models.TextField()
    french_text = models.TextField()
    russian_text = models.TextField()
    portuguese_text = models.TextField()
    italian_text = models.TextField()
    hindi_text = models.TextField()
    arab_text = models.TextField()
    turkish_text = models.TextField()
    japanese_text = models.TextField()
    romanian_text = models.TextField()
    polish_text = models.TextField()
    czech_text = models.TextField()
    indonesian_text = models.TextField()

    level = models.PositiveSmallIntegerField()
    coordinates = models.CharField(max_length=50)  # "lat,lon"
    province = models.CharField(max_length=200)
    country = models.CharField(max_length=50, db_index=True)
    tag = models.CharField(max_length=50, db_index=True)
    image = models.TextField()
    web = models.TextField(null=True, blank=True)
    phone = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "places"
        ordering = ["code"]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"

    def to_min_place(self) -> "MinPlace":
        """
        Build the unsaved MinPlace projection of this place.
        """
        return MinPlace(**{field: getattr(self, field) for field in SHARED_FIELDS})


class MinPlace(models.Model):
    """
    Lightweight projection of Place served by list endpoints.
    """

    code = models.CharField(max_length=50, primary_key=True)
    name = models.TextField()
    province = models.CharField(max_length=200)
    country = models.CharField(max_length=50, db_index=True)
    coordinates = models.CharField(max_length=50)
    tag = models.CharField(max_length=50, db_index=True)
    image = models.TextField()
    level = models.PositiveSmallIntegerField()
    web = models.TextField(null=True, blank=True)
    phone = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "min_places"
        ordering = ["code"]
        verbose_name = "min place"

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"
