import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("reservation_id", models.BigAutoField(primary_key=True, serialize=False)),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("mobile_number", models.CharField(max_length=30)),
                ("mobile_digits", models.CharField(db_index=True, default="", editable=False, max_length=30)),
                ("people", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("reservation_date", models.DateField(db_index=True)),
                ("reservation_time", models.TimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("booked", "Booked"),
                            ("seated", "Seated"),
                            ("finished", "Finished"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="booked",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["reservation_date", "reservation_time"],
            },
        ),
        migrations.CreateModel(
            name="Table",
            fields=[
                ("table_id", models.BigAutoField(primary_key=True, serialize=False)),
                ("table_name", models.CharField(max_length=50, validators=[django.core.validators.MinLengthValidator(2)])),
                ("capacity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "reservation",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="table",
                        to="core.reservation",
                    ),
                ),
            ],
            options={
                "ordering": ["table_name"],
            },
        ),
    ]
