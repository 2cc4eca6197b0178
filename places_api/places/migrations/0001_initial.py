from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MinPlace",
            fields=[
                ("code", models.CharField(max_length=50, primary_key=True, serialize=False)),
                ("name", models.TextField()),
                ("province", models.CharField(max_length=200)),
                ("country", models.CharField(db_index=True, max_length=50)),
                ("coordinates", models.CharField(max_length=50)),
                ("tag", models.CharField(db_index=True, max_length=50)),
                ("image", models.TextField()),
                ("level", models.PositiveSmallIntegerField()),
                ("web", models.TextField(blank=True, null=True)),
                ("phone", models.TextField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "min place",
                "db_table": "min_places",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="Place",
            fields=[
                ("code", models.CharField(max_length=50, primary_key=True, serialize=False)),
                ("sources", models.TextField()),
                ("name", models.TextField()),
                ("english_text", models.TextField()),
                ("spanish_text", models.TextField()),
                ("chinese_text", models.TextField()),
                ("german_text", models.TextField()),
                ("french_text", models.TextField()),
                ("russian_text", models.TextField()),
                ("portuguese_text", models.TextField()),
                ("italian_text", models.TextField()),
                ("hindi_text", models.TextField()),
                ("arab_text", models.TextField()),
                ("turkish_text", models.TextField()),
                ("japanese_text", models.TextField()),
                ("romanian_text", models.TextField()),
                ("polish_text", models.TextField()),
                ("czech_text", models.TextField()),
                ("indonesian_text", models.TextField()),
                ("level", models.PositiveSmallIntegerField()),
                ("coordinates", models.CharField(max_length=50)),
                ("province", models.CharField(max_length=200)),
                ("country", models.CharField(db_index=True, max_length=50)),
                ("tag", models.CharField(db_index=True, max_length=50)),
                ("image", models.TextField()),
                ("web", models.TextField(blank=True, null=True)),
                ("phone", models.TextField(blank=True, null=True)),
            ],
            options={
                "db_table": "places",
                "ordering": ["code"],
            },
        ),
    ]
