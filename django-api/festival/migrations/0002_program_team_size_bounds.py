from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("festival", "0001_initial"),
    ]

    operations = [
        migrations.AddConstraint(
            model_name="program",
            constraint=models.CheckConstraint(
                condition=models.Q(("min_members__lte", models.F("max_members"))),
                name="program_team_size_bounds",
            ),
        ),
    ]
