from django.urls import path
from . import views

urlpatterns = [
    path('dashboard/', views.dashboard, name='dashboard'),
    path('synthesis/', views.stock_synthesis, name='stock_synthesis'),
    path('inventory/export/', views.export_inventory, name='export_inventory'),
]
