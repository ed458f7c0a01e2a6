import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="event",
            name="time",
            field=models.CharField(
                blank=True,
                default="",
                max_length=5,
                validators=[
                    django.core.validators.RegexValidator(
                        "^([01]\\d|2[0-3]):[0-5]\\d$", "Time must be in HH:MM format."
                    )
                ],
            ),
        ),
    ]
