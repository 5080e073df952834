from django.urls import path
from . import views

urlpatterns = [
    path('', views.DonorListCreateView.as_view(), name='donor-list'),
    path('<int:pk>/', views.DonorDetailView.as_view(), name='donor-detail'),
    path('<int:pk>/donation-date/', views.DonationDateView.as_view(), name='donor-donation-date'),
    path('email/<str:email>/', views.DonorByEmailView.as_view(), name='donor-by-email'),
    path('eligible/', views.EligibleDonorListView.as_view(), name='donor-eligible'),
    path('can-donate/', views.AvailableDonorListView.as_view(), name='donor-can-donate'),
    path('search/', views.DonorSearchView.as_view(), name='donor-search'),
    path('recent/', views.RecentDonorListView.as_view(), name='donor-recent'),
    path('statistics/', views.DonorStatisticsView.as_view(), name='donor-statistics'),
]
