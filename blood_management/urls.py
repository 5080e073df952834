from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/donors/', include('donors.urls')),
    path('api/inventory/', include('inventory.urls')),
    path('api/requests/', include('bloodrequests.urls')),
    path('api/dashboard/', include('dashboard.urls')),
]
