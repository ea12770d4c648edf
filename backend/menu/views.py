import logging

from rest_framework import status, viewsets
from rest_framework.response import Response

from users.permissions import IsAdmin, IsAdminOrKitchen

from .models import MenuItem
from .serializers import MenuItemSerializer
from .services import MenuService

logger = logging.getLogger(__name__)


class MenuItemViewSet(viewsets.ModelViewSet):
    """
    Menu administration. Kitchen screens may read the menu; only admins change it.
    """

    queryset = MenuItem.objects.all()
    serializer_class = MenuItemSerializer
    filterset_fields = ["category", "priority"]

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [IsAdminOrKitchen()]
        return [IsAdmin()]

    def get_service(self):
        return MenuService()

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({"success": True, "count": len(serializer.data), "menu_items": serializer.data})

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({"success": True, "menu_item": serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = self.get_service().create_item(**serializer.validated_data)
        return Response(
            {
                "success": True,
                "message": "Menu item created successfully",
                "menu_item": self.get_serializer(item).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        item = self.get_service().update_item(instance, **serializer.validated_data)
        return Response(
            {
                "success": True,
                "message": "Menu item updated successfully",
                "menu_item": self.get_serializer(item).data,
            }
        )

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.get_service().delete_item(instance)
        return Response({"success": True, "message": "Menu item deleted successfully"})
