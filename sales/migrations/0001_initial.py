import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('inventory', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Sale',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reference', models.CharField(blank=True, help_text='Unique sale identifier (e.g., VNT-ABC12345)', max_length=100, unique=True)),
                ('seller_name', models.CharField(help_text='Seller name at time of sale', max_length=200)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Sum of all sale lines', max_digits=14)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='When the sale was made')),
                ('seller', models.ForeignKey(blank=True, help_text='User who ran the checkout', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sales', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'sales_sale',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_at'], name='sales_sale_date_idx'),
                    models.Index(fields=['seller', 'created_at'], name='sales_sale_seller_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SaleLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_name', models.CharField(help_text='Product name at time of sale', max_length=200)),
                ('product_sku', models.CharField(blank=True, help_text='Product SKU at time of sale', max_length=100, null=True)),
                ('quantity', models.IntegerField(help_text='Quantity sold', validators=[django.core.validators.MinValueValidator(1)])),
                ('unit_price', models.DecimalField(decimal_places=2, help_text='Price per unit at time of sale', max_digits=12)),
                ('product', models.ForeignKey(blank=True, help_text='Reference to the catalog product', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sale_lines', to='inventory.product')),
                ('sale', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='sales.sale')),
            ],
            options={
                'db_table': 'sales_saleline',
                'unique_together': {('sale', 'product')},
            },
        ),
    ]
