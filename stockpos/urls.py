from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

admin.site.site_header = f"{settings.SHOP_NAME} Administration"
admin.site.site_title = f"{settings.SHOP_NAME} Admin"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('auth/', include('authentication.urls')),
    path('inventory/', include('inventory.urls')),
    path('cart/', include('cart.urls')),
    path('sales/', include('sales.urls')),
    path('reports/', include('reports.urls')),
    path('activity/', include('activity.urls')),
    path('notifications/', include('notifications.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
