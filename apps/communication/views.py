from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdmin
from .serializers import ContactSerializer, ContactCreateSerializer, ContactFilterSerializer
from .services import (
    create_contact,
    list_contacts,
    mark_contact_read,
    delete_contact,
    ContactNotFoundError,
)


class ContactPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ContactViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for contact form messages.

    create: Anyone (public site form)
    list/retrieve/read/destroy: Admin only
    """

    serializer_class = ContactSerializer
    pagination_class = ContactPagination

    def get_queryset(self):
        filters = ContactFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_contacts(unread_only=filters.validated_data['unread'])

    def get_permissions(self):
        if self.action == 'create':
            return [AllowAny()]
        return [IsAuthenticated(), IsAdmin()]

    @extend_schema(request=ContactCreateSerializer, responses={201: ContactSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ContactCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        contact = create_contact(**serializer.validated_data)
        return Response(ContactSerializer(contact).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_contact(contact_id=self.kwargs['pk'])
        except ContactNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: ContactSerializer})
    @action(detail=True, methods=['patch'])
    def read(self, request, pk=None):
        """PATCH /api/contacts/{id}/read/"""
        try:
            contact = mark_contact_read(contact_id=pk)
        except ContactNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ContactSerializer(contact).data)
