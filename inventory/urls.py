# inventory/urls.py

from django.urls import path
from . import views

urlpatterns = [
    # Product management
    path('list/', views.list_products, name='list_products'),
    path('available/', views.available_products, name='available_products'),
    path('new/', views.create_product, name='create_product'),
    path('update/<int:product_id>/', views.update_product, name='update_product'),
    path('restock/<int:product_id>/', views.restock_product, name='restock_product'),
    path('archive/<int:product_id>/', views.archive_product, name='archive_product'),
    path('delete/<int:product_id>/', views.delete_product, name='delete_product'),

    # Categories
    path('categories/', views.list_categories, name='list_categories'),
    path('category/new/', views.create_category, name='create_category'),

    # Stock movements
    path('stock-movements/<int:product_id>/', views.stock_movements, name='stock_movements'),
    path('movements/', views.movement_journal, name='movement_journal'),
]
