import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("event_type", models.CharField(choices=[("FREE", "Free"), ("PAID", "Paid")], default="PAID", max_length=20)),
                ("start_date", models.DateField()),
                ("deposit_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("currency", models.CharField(default="USD", max_length=3)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["start_date"],
                "indexes": [models.Index(fields=["start_date"], name="event_start_date_idx")],
            },
        ),
        migrations.CreateModel(
            name="LineItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("line_item_type", models.CharField(choices=[("AGE_BASED", "Age Based"), ("FIXED", "Fixed"), ("OPTIONAL_FIXED", "Optional Fixed")], default="FIXED", max_length=20)),
                ("calculation_method", models.CharField(choices=[("FIXED_AMOUNT", "Fixed Amount"), ("AGE_MULTIPLIER", "Age Multiplier"), ("PERCENTAGE", "Percentage")], default="FIXED_AMOUNT", max_length=20)),
                ("base_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("min_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("max_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("multiplier", models.DecimalField(blank=True, decimal_places=4, max_digits=10, null=True)),
                ("is_required", models.BooleanField(default=False)),
                ("sort_order", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="line_items", to="registrations.event")),
            ],
            options={
                "ordering": ["sort_order"],
                "indexes": [models.Index(fields=["event", "sort_order"], name="line_item_event_sort_idx")],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.CharField(max_length=255)),
                ("status", models.CharField(choices=[("CONFIRMED", "Confirmed"), ("CANCELLED", "Cancelled")], default="CONFIRMED", max_length=20)),
                ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("deposit_paid", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("balance_due", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("payment_status", models.CharField(choices=[("UNPAID", "Unpaid"), ("DEPOSIT_PAID", "Deposit Paid"), ("FULLY_PAID", "Fully Paid")], default="UNPAID", max_length=20)),
                ("note", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="registrations", to="registrations.event")),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [models.UniqueConstraint(fields=("event", "user_id"), name="unique_registration_per_user")],
            },
        ),
        migrations.CreateModel(
            name="RegistrationLineItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("calculated_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("user_age", models.PositiveIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("line_item", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="registration_line_items", to="registrations.lineitem")),
                ("registration", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="line_items", to="registrations.registration")),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
        migrations.CreateModel(
            name="RegistrationDiscount",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("discount_type", models.CharField(choices=[("FIXED_AMOUNT", "Fixed Amount"), ("PERCENTAGE", "Percentage")], max_length=20)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("registration", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="discounts", to="registrations.registration")),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
    ]
