from rest_framework import generics, permissions, status, views

from core.exceptions import ValidationFailed
from core.utils import success_response
from .serializers import (
    DonationDateSerializer,
    DonorCreateSerializer,
    DonorSerializer,
    DonorStatsSerializer,
    DonorSummarySerializer,
    DonorUpdateSerializer,
)
from .services import DonorService


class DonorListCreateView(generics.GenericAPIView):
    """List donors (optionally by blood group) or register a new donor"""
    serializer_class = DonorCreateSerializer
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        donors = DonorService.list_all(blood_group=request.query_params.get('blood_group'))
        return success_response(
            "Donors retrieved successfully",
            data=DonorSummarySerializer(donors, many=True).data
        )

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        donor = DonorService.register(**serializer.validated_data)
        return success_response(
            "Donor registered successfully",
            data=DonorSerializer(donor).data,
            status_code=status.HTTP_201_CREATED
        )


class DonorDetailView(generics.GenericAPIView):
    """Retrieve, update or delete a donor"""
    serializer_class = DonorUpdateSerializer
    permission_classes = [permissions.AllowAny]

    def get(self, request, pk):
        donor = DonorService.get(pk)
        return success_response("Donor retrieved successfully", data=DonorSerializer(donor).data)

    def put(self, request, pk):
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        donor = DonorService.update(pk, **serializer.validated_data)
        return success_response("Donor updated successfully", data=DonorSerializer(donor).data)

    patch = put

    def delete(self, request, pk):
        DonorService.delete(pk)
        return success_response("Donor deleted successfully")


class DonorByEmailView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, email):
        donor = DonorService.get_by_email(email)
        return success_response("Donor retrieved successfully", data=DonorSerializer(donor).data)


class EligibleDonorListView(views.APIView):
    """Donors whose eligibility flag is set"""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        donors = DonorService.eligible()
        return success_response(
            "Eligible donors retrieved successfully",
            data=DonorSummarySerializer(donors, many=True).data
        )


class AvailableDonorListView(views.APIView):
    """Donors who can donate now, optionally filtered by blood group"""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        donors = DonorService.available(blood_group=request.query_params.get('blood_group'))
        return success_response(
            "Available donors retrieved successfully",
            data=DonorSummarySerializer(donors, many=True).data
        )


class DonorSearchView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        name = request.query_params.get('name', '').strip()
        if not name:
            raise ValidationFailed("Search name is required", errors={'name': ['This field is required.']})
        donors = DonorService.search_by_name(name)
        return success_response(
            "Donors retrieved successfully",
            data=DonorSummarySerializer(donors, many=True).data
        )


class RecentDonorListView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        donors = DonorService.recent()
        return success_response(
            "Recent donors retrieved successfully",
            data=DonorSummarySerializer(donors, many=True).data
        )


class DonorStatisticsView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        serializer = DonorStatsSerializer(DonorService.statistics(), many=True)
        return success_response("Donor statistics retrieved successfully", data=serializer.data)


class DonationDateView(generics.GenericAPIView):
    """Record the date of a donor's latest donation"""
    serializer_class = DonationDateSerializer
    permission_classes = [permissions.AllowAny]

    def put(self, request, pk):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        donor = DonorService.record_donation(pk, serializer.validated_data['donation_date'])
        return success_response("Donation date updated successfully", data=DonorSerializer(donor).data)
