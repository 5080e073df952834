from django.urls import path
from . import views

urlpatterns = [
    path('', views.InventoryListCreateView.as_view(), name='inventory-list'),
    path('<int:pk>/', views.InventoryDetailView.as_view(), name='inventory-detail'),
    path('blood-group/<str:blood_group>/', views.InventoryByBloodGroupView.as_view(), name='inventory-by-blood-group'),

    # Stock queries
    path('critical-shortages/', views.StockListView.as_view(
        query='critical_shortages', message="Critical shortages retrieved successfully"), name='inventory-critical'),
    path('low-stock/', views.StockListView.as_view(
        query='low_stock', message="Low stock inventories retrieved successfully"), name='inventory-low-stock'),
    path('out-of-stock/', views.StockListView.as_view(
        query='out_of_stock', message="Out of stock inventories retrieved successfully"), name='inventory-out-of-stock'),
    path('adequate-stock/', views.StockListView.as_view(
        query='adequate_stock', message="Adequate stock inventories retrieved successfully"), name='inventory-adequate'),
    path('availability/', views.AvailabilityView.as_view(), name='inventory-availability'),
    path('statistics/', views.InventoryStatisticsView.as_view(), name='inventory-statistics'),
    path('initialize/', views.InitializeInventoryView.as_view(), name='inventory-initialize'),

    # Unit adjustments
    path('<str:blood_group>/add-units/', views.AddUnitsView.as_view(), name='inventory-add-units'),
    path('<str:blood_group>/remove-units/', views.RemoveUnitsView.as_view(), name='inventory-remove-units'),
    path('<str:blood_group>/check-availability/', views.CheckAvailabilityView.as_view(), name='inventory-check-availability'),
]
