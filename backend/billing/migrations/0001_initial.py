from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='BillingSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('shop_name', models.CharField(default='Karanjkar Tailors', max_length=200)),
                ('shop_address', models.TextField(blank=True, default='Your Shop Address')),
                ('shop_phone', models.CharField(blank=True, default='+91 00000 00000', max_length=30)),
                ('shop_gstin', models.CharField(blank=True, default='', max_length=20)),
                ('invoice_prefix', models.CharField(blank=True, default='KT', max_length=20)),
                ('logo_url', models.CharField(blank=True, default='/default-tailor-logo.svg', max_length=500)),
                ('logo_data_url', models.TextField(blank=True, default='')),
                ('apply_tax', models.BooleanField(default=True)),
                ('tax_percent', models.DecimalField(decimal_places=2, default=Decimal('5.00'), max_digits=5)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'billing_settings',
                'verbose_name_plural': 'billing settings',
            },
        ),
    ]
