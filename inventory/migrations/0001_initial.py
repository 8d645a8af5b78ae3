import django.core.validators
import django.db.models.deletion
import inventory.models
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Category name (e.g., 'Drinks', 'Groceries')", max_length=100, unique=True)),
                ('description', models.TextField(blank=True, help_text='Optional category description', null=True)),
                ('slug', models.SlugField(help_text='URL-friendly version of category name', unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'Categories',
                'db_table': 'inventory_category',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Product name', max_length=200)),
                ('sku', models.CharField(blank=True, help_text='Stock Keeping Unit - unique product identifier', max_length=100, null=True, unique=True)),
                ('quantity', models.IntegerField(default=0, help_text='Available stock quantity', validators=[django.core.validators.MinValueValidator(0)])),
                ('min_threshold', models.IntegerField(default=inventory.models.default_min_threshold, help_text='Stock level at or below which the product is critical', validators=[django.core.validators.MinValueValidator(0)])),
                ('unit_price', models.DecimalField(decimal_places=2, help_text='Selling price per unit', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('image', models.ImageField(blank=True, help_text='Product image', null=True, upload_to='products/')),
                ('is_archived', models.BooleanField(default=False, help_text='Archived products are hidden from the till')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(blank=True, help_text='Product category', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='products', to='inventory.category')),
            ],
            options={
                'db_table': 'inventory_product',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['name'], name='inventory_product_name_idx'),
                    models.Index(fields=['is_archived', 'quantity'], name='inventory_product_stock_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('in', 'In'), ('out', 'Out')], max_length=3)),
                ('quantity', models.IntegerField(help_text='Number of units moved (always positive, see type)', validators=[django.core.validators.MinValueValidator(1)])),
                ('reason', models.CharField(help_text="Why stock changed: 'initial_stock', 'restock', 'sale', 'adjustment'", max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_movements', to=settings.AUTH_USER_MODEL)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_movements', to='inventory.product')),
            ],
            options={
                'db_table': 'inventory_stock_movement',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_at'], name='inventory_movement_date_idx'),
                    models.Index(fields=['product', 'created_at'], name='inventory_movement_prod_idx'),
                ],
            },
        ),
    ]
