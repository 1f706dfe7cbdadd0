import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ParcelEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('task_id', models.CharField(max_length=100, verbose_name='Task ID')),
                ('seller_id', models.CharField(max_length=100, verbose_name='Seller ID')),
                ('courier', models.CharField(choices=[('SPX', 'SPX'), ('Flash', 'Flash')], max_length=20, verbose_name='Courier')),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='Quantity')),
                ('picked_up_same_day', models.BooleanField(default=False, help_text='Only meaningful for SPX', verbose_name='Picked up same day')),
                ('date', models.DateField(db_index=True, verbose_name='Date')),
                ('total_earning', models.DecimalField(decimal_places=2, editable=False, max_digits=10, verbose_name='Total earning (₱)')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='parcel_entries', to=settings.AUTH_USER_MODEL, verbose_name='Logged by')),
            ],
            options={
                'verbose_name': 'Parcel entry',
                'verbose_name_plural': 'Parcel entries',
                'ordering': ['-date', '-created_at', '-id'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 1)), name='parcel_entry_quantity_positive'),
                    models.CheckConstraint(condition=models.Q(('total_earning__gte', 0)), name='parcel_entry_earning_non_negative'),
                ],
            },
        ),
    ]
