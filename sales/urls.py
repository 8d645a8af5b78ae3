from django.urls import path
from . import views

urlpatterns = [
    path('history/', views.sales_history, name='sales_history'),
    path('detail/<int:sale_id>/', views.sale_detail, name='sale_detail'),
    path('receipt/<int:sale_id>/', views.sale_receipt, name='sale_receipt'),
    path('export/', views.export_sales, name='export_sales'),
]
