from rest_framework import generics, permissions, status, views

from core.utils import parse_positive_int, success_response
from .serializers import (
    BloodGroupAvailabilitySerializer,
    BloodInventoryCreateSerializer,
    BloodInventorySerializer,
    BloodInventorySummarySerializer,
    BloodInventoryUpdateSerializer,
    InventoryStatsSerializer,
    UnitsUpdateSerializer,
)
from .services import InventoryService


class InventoryListCreateView(generics.GenericAPIView):
    """List all blood group inventories or create a new one"""
    serializer_class = BloodInventoryCreateSerializer
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        inventories = InventoryService.list_all()
        return success_response(
            "Blood inventories retrieved successfully",
            data=BloodInventorySummarySerializer(inventories, many=True).data
        )

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        inventory = InventoryService.create(**serializer.validated_data)
        return success_response(
            "Blood inventory created successfully",
            data=BloodInventorySerializer(inventory).data,
            status_code=status.HTTP_201_CREATED
        )


class InventoryDetailView(generics.GenericAPIView):
    """Retrieve, update or delete a blood inventory record"""
    serializer_class = BloodInventoryUpdateSerializer
    permission_classes = [permissions.AllowAny]

    def get(self, request, pk):
        inventory = InventoryService.get(pk)
        return success_response(
            "Blood inventory retrieved successfully",
            data=BloodInventorySerializer(inventory).data
        )

    def put(self, request, pk):
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        inventory = InventoryService.update(pk, **serializer.validated_data)
        return success_response(
            "Blood inventory updated successfully",
            data=BloodInventorySerializer(inventory).data
        )

    patch = put

    def delete(self, request, pk):
        InventoryService.delete(pk)
        return success_response("Blood inventory deleted successfully")


class InventoryByBloodGroupView(views.APIView):
    """Retrieve the inventory record of one blood group"""
    permission_classes = [permissions.AllowAny]

    def get(self, request, blood_group):
        inventory = InventoryService.get_by_blood_group(blood_group)
        return success_response(
            "Blood inventory retrieved successfully",
            data=BloodInventorySerializer(inventory).data
        )


class AddUnitsView(generics.GenericAPIView):
    """Credit units to a blood group"""
    serializer_class = UnitsUpdateSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, blood_group):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        inventory = InventoryService.credit(
            blood_group,
            serializer.validated_data['units'],
            notes=serializer.validated_data.get('notes')
        )
        return success_response(
            "Units added successfully",
            data=BloodInventorySerializer(inventory).data
        )


class RemoveUnitsView(generics.GenericAPIView):
    """Debit units from a blood group"""
    serializer_class = UnitsUpdateSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, blood_group):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        inventory = InventoryService.debit(
            blood_group,
            serializer.validated_data['units'],
            notes=serializer.validated_data.get('notes')
        )
        return success_response(
            "Units removed successfully",
            data=BloodInventorySerializer(inventory).data
        )


class CheckAvailabilityView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, blood_group):
        required_units = parse_positive_int(request.query_params.get('required_units'), 'required_units')
        available = InventoryService.has_sufficient_units(blood_group, required_units)
        return success_response("Availability checked successfully", data=available)


class StockListView(views.APIView):
    """List inventories selected by one of the stock queries"""
    permission_classes = [permissions.AllowAny]
    query = None
    message = "Blood inventories retrieved successfully"

    def get(self, request):
        inventories = getattr(InventoryService, self.query)()
        return success_response(
            self.message,
            data=BloodInventorySummarySerializer(inventories, many=True).data
        )


class AvailabilityView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        serializer = BloodGroupAvailabilitySerializer(InventoryService.availability(), many=True)
        return success_response("Blood group availability retrieved successfully", data=serializer.data)


class InventoryStatisticsView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        serializer = InventoryStatsSerializer(InventoryService.statistics())
        return success_response("Inventory statistics retrieved successfully", data=serializer.data)


class InitializeInventoryView(views.APIView):
    """Create empty records for every missing blood group"""
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        created = InventoryService.initialize_all_groups()
        return success_response(
            "Blood groups initialized successfully",
            data={'initialized': created}
        )
