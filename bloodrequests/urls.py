from django.urls import path
from . import views

urlpatterns = [
    path('', views.BloodRequestListCreateView.as_view(), name='request-list'),
    path('<int:pk>/', views.BloodRequestDetailView.as_view(), name='request-detail'),

    # Workflow actions
    path('<int:pk>/status/', views.BloodRequestStatusView.as_view(), name='request-status'),
    path('<int:pk>/approve-fulfill/', views.ApproveAndFulfillView.as_view(), name='request-approve-fulfill'),
    path('<int:pk>/cancel/', views.CancelBloodRequestView.as_view(), name='request-cancel'),

    # Queries
    path('pending/', views.BloodRequestQueryView.as_view(
        query='pending', message="Pending blood requests retrieved successfully"), name='request-pending'),
    path('emergency/', views.BloodRequestQueryView.as_view(
        query='emergency_pending', message="Emergency blood requests retrieved successfully"), name='request-emergency'),
    path('recent/', views.BloodRequestQueryView.as_view(
        query='recent', message="Recent blood requests retrieved successfully"), name='request-recent'),
    path('overdue/', views.BloodRequestQueryView.as_view(
        query='overdue_pending', message="Overdue blood requests retrieved successfully"), name='request-overdue'),
    path('search/', views.BloodRequestSearchView.as_view(), name='request-search'),

    # Statistics
    path('statistics/', views.RequestStatisticsView.as_view(), name='request-statistics'),
    path('statistics/blood-groups/', views.BloodGroupRequestStatisticsView.as_view(), name='request-statistics-blood-groups'),
]
