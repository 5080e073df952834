from rest_framework import generics, permissions, status, views

from core.exceptions import ValidationFailed
from core.utils import success_response
from .serializers import (
    BloodGroupRequestStatsSerializer,
    BloodRequestCreateSerializer,
    BloodRequestSerializer,
    BloodRequestStatusSerializer,
    BloodRequestSummarySerializer,
    CancelSerializer,
    FulfillSerializer,
    RequestStatsSerializer,
)
from .services import BloodRequestService


class BloodRequestListCreateView(generics.GenericAPIView):
    """List blood requests with filtering, or create a new one"""
    serializer_class = BloodRequestCreateSerializer
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        params = self.request.query_params
        blood_requests = BloodRequestService.list_all(
            status=params.get('status'),
            blood_group=params.get('blood_group'),
            email=params.get('email'),
            search=params.get('search'),
        )
        return success_response(
            "Blood requests retrieved successfully",
            data=BloodRequestSummarySerializer(blood_requests, many=True).data
        )

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        blood_request = BloodRequestService.create(**serializer.validated_data)
        return success_response(
            "Blood request created successfully",
            data=BloodRequestSerializer(blood_request).data,
            status_code=status.HTTP_201_CREATED
        )


class BloodRequestDetailView(views.APIView):
    """Retrieve or delete a blood request"""
    permission_classes = [permissions.AllowAny]

    def get(self, request, pk):
        blood_request = BloodRequestService.get(pk)
        return success_response(
            "Blood request details retrieved successfully",
            data=BloodRequestSerializer(blood_request).data
        )

    def delete(self, request, pk):
        BloodRequestService.delete(pk)
        return success_response("Blood request deleted successfully")


class BloodRequestQueryView(views.APIView):
    """List blood requests selected by one of the workflow queries"""
    permission_classes = [permissions.AllowAny]
    query = None
    message = "Blood requests retrieved successfully"

    def get(self, request):
        blood_requests = getattr(BloodRequestService, self.query)()
        return success_response(
            self.message,
            data=BloodRequestSummarySerializer(blood_requests, many=True).data
        )


class BloodRequestSearchView(views.APIView):
    """Case-insensitive search over hospital and patient names"""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        text = request.query_params.get('q', '').strip()
        if not text:
            raise ValidationFailed("Search text is required", errors={'q': ['This field is required.']})
        blood_requests = BloodRequestService.search(text)
        return success_response(
            "Blood requests retrieved successfully",
            data=BloodRequestSummarySerializer(blood_requests, many=True).data
        )


class BloodRequestStatusView(generics.GenericAPIView):
    """Approve, reject or close a pending request without touching inventory"""
    serializer_class = BloodRequestStatusSerializer
    permission_classes = [permissions.AllowAny]

    def put(self, request, pk):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        blood_request = BloodRequestService.update_status(
            pk,
            serializer.validated_data['status'],
            admin_notes=serializer.validated_data['admin_notes'],
            processed_by=serializer.validated_data['processed_by'],
        )
        return success_response(
            f"Blood request {blood_request.get_status_display().lower()} successfully",
            data=BloodRequestSerializer(blood_request).data
        )


class ApproveAndFulfillView(generics.GenericAPIView):
    """Approve a request and debit the matching inventory"""
    serializer_class = FulfillSerializer
    permission_classes = [permissions.AllowAny]

    def put(self, request, pk):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        blood_request = BloodRequestService.approve_and_fulfill(pk, **serializer.validated_data)
        return success_response(
            "Blood request approved and fulfilled successfully",
            data=BloodRequestSerializer(blood_request).data
        )


class CancelBloodRequestView(generics.GenericAPIView):
    serializer_class = CancelSerializer
    permission_classes = [permissions.AllowAny]

    def put(self, request, pk):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        blood_request = BloodRequestService.cancel(pk, serializer.validated_data['reason'])
        return success_response(
            "Request cancelled successfully",
            data=BloodRequestSerializer(blood_request).data
        )


class RequestStatisticsView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        serializer = RequestStatsSerializer(BloodRequestService.statistics())
        return success_response("Request statistics retrieved successfully", data=serializer.data)


class BloodGroupRequestStatisticsView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        serializer = BloodGroupRequestStatsSerializer(BloodRequestService.blood_group_statistics(), many=True)
        return success_response("Blood group request statistics retrieved successfully", data=serializer.data)
