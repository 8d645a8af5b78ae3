from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from rest_framework.exceptions import NotFound
from django.shortcuts import get_object_or_404
from django.db import transaction
from django.db.models import Q
import logging

from activity.utils import log_activity
from authentication.permissions import IsAdmin
from .filters import ProductFilter, StockMovementFilter
from .models import Category, Product, StockMovement
from .serializers import (
    CategorySerializer, ProductListSerializer, ProductDetailSerializer,
    ProductCreateSerializer, ProductUpdateSerializer, RestockSerializer,
    StockMovementSerializer
)

logger = logging.getLogger(__name__)

# The audit journal only looks at the most recent movements
JOURNAL_LIMIT = 100


class MovementPagination(PageNumberPagination):
    """
    Custom pagination for the stock movement journal
    """
    page_size = 5
    page_size_query_param = 'page_size'
    max_page_size = 100


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_products(request):
    """
    List products for inventory management
    GET /inventory/list
    GET /inventory/list?search=rice&stock=low
    """
    filterset = ProductFilter(
        request.query_params,
        queryset=Product.objects.select_related('category').order_by('name')
    )

    if not filterset.is_valid():
        return Response({
            'success': False,
            'message': 'Invalid filters',
            'errors': filterset.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        products = filterset.qs
        serializer = ProductListSerializer(products, many=True)

        return Response({
            'success': True,
            'count': products.count(),
            'products': serializer.data
        })

    except Exception as e:
        logger.error(f"Error listing products: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to retrieve products',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def available_products(request):
    """
    Products that can be sold right now (till product picker)
    GET /inventory/available
    """
    products = Product.objects.filter(is_archived=False, quantity__gt=0).order_by('name')

    search = request.GET.get('search', '').strip()
    if search:
        products = products.filter(Q(name__icontains=search) | Q(sku__icontains=search))

    serializer = ProductListSerializer(products, many=True)
    return Response({
        'success': True,
        'count': products.count(),
        'products': serializer.data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_product(request):
    """
    Create a new product
    POST /inventory/new
    """
    serializer = ProductCreateSerializer(data=request.data, context={'user': request.user})

    if serializer.is_valid():
        try:
            with transaction.atomic():
                product = serializer.save()

            log_activity(request.user, 'create_product', {
                'product_id': product.id,
                'name': product.name,
                'quantity': product.quantity,
            })

            logger.info(f"New product created: {product.name} by {request.user.username}")

            return Response({
                'success': True,
                'message': 'Product created successfully',
                'product': ProductDetailSerializer(product).data
            }, status=status.HTTP_201_CREATED)

        except Exception as e:
            logger.error(f"Error creating product: {str(e)}")
            return Response({
                'success': False,
                'message': 'Failed to create product',
                'error': str(e)
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'success': False,
        'message': 'Invalid data provided',
        'errors': serializer.errors
    }, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def update_product(request, product_id):
    """
    Get or update a product
    GET/PUT/PATCH /inventory/update/<id>
    """
    product = get_object_or_404(Product, id=product_id)

    if request.method == 'GET':
        serializer = ProductDetailSerializer(product)
        return Response({
            'success': True,
            'product': serializer.data
        })

    serializer = ProductUpdateSerializer(
        product,
        data=request.data,
        partial=request.method == 'PATCH',
        context={'user': request.user}
    )

    if serializer.is_valid():
        try:
            with transaction.atomic():
                updated_product = serializer.save()

            log_activity(request.user, 'edit_product', {
                'product_id': updated_product.id,
                'name': updated_product.name,
                'stock_diff': serializer.stock_diff,
            })

            logger.info(f"Product updated: {updated_product.name} by {request.user.username}")

            return Response({
                'success': True,
                'message': 'Product updated successfully',
                'product': ProductDetailSerializer(updated_product).data
            })

        except Exception as e:
            logger.error(f"Error updating product: {str(e)}")
            return Response({
                'success': False,
                'message': 'Failed to update product',
                'error': str(e)
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'success': False,
        'message': 'Invalid data provided',
        'errors': serializer.errors
    }, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def restock_product(request, product_id):
    """
    Restock a product (add quantity)
    PATCH /inventory/restock/<id>
    """
    product = get_object_or_404(Product, id=product_id)

    serializer = RestockSerializer(product, data=request.data, context={'user': request.user})

    if serializer.is_valid():
        try:
            with transaction.atomic():
                updated_product = serializer.save()

            added = serializer.validated_data['quantity_to_add']
            log_activity(request.user, 'restock_product', {
                'product_id': updated_product.id,
                'name': updated_product.name,
                'added': added,
            })

            logger.info(f"Product restocked: {updated_product.name} (+{added}) by {request.user.username}")

            return Response({
                'success': True,
                'message': 'Product restocked successfully',
                'product': ProductDetailSerializer(updated_product).data
            })

        except Exception as e:
            logger.error(f"Error restocking product: {str(e)}")
            return Response({
                'success': False,
                'message': 'Failed to restock product',
                'error': str(e)
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'success': False,
        'message': 'Invalid data provided',
        'errors': serializer.errors
    }, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def archive_product(request, product_id):
    """
    Archive a product, or restore it when already archived
    POST /inventory/archive/<id>
    """
    product = get_object_or_404(Product, id=product_id)

    product.is_archived = not product.is_archived
    product.save(update_fields=['is_archived', 'updated_at'])

    action = 'archive_product' if product.is_archived else 'unarchive_product'
    log_activity(request.user, action, {'product_id': product.id, 'name': product.name})

    logger.info(f"Product {'archived' if product.is_archived else 'restored'}: {product.name} by {request.user.username}")

    return Response({
        'success': True,
        'message': 'Product archived' if product.is_archived else 'Product restored',
        'product': ProductDetailSerializer(product).data
    })


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def delete_product(request, product_id):
    """
    Permanently delete a product (sale lines keep its name)
    DELETE /inventory/delete/<id>
    """
    product = get_object_or_404(Product, id=product_id)

    try:
        name = product.name
        product.delete()

        log_activity(request.user, 'delete_product', {'product_id': product_id, 'name': name})

        logger.info(f"Product deleted: {name} by {request.user.username}")

        return Response({
            'success': True,
            'message': 'Product deleted'
        })

    except Exception as e:
        logger.error(f"Error deleting product: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to delete product',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


# Categories

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_categories(request):
    """
    List all categories
    GET /inventory/categories
    """
    categories = Category.objects.all()
    serializer = CategorySerializer(categories, many=True)
    return Response({
        'success': True,
        'categories': serializer.data
    })


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def create_category(request):
    """
    Create a new category
    POST /inventory/category/new
    """
    serializer = CategorySerializer(data=request.data)
    if serializer.is_valid():
        try:
            category = serializer.save()
            log_activity(request.user, 'create_category', {'category_id': category.id, 'name': category.name})
            logger.info(f"New category created: {category.name} by {request.user.username}")

            return Response({
                'success': True,
                'message': 'Category created successfully',
                'category': CategorySerializer(category).data
            }, status=status.HTTP_201_CREATED)
        except Exception as e:
            logger.error(f"Error in creating category: {e}")
            return Response({
                'success': False,
                'message': 'Failed to create category'
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'success': False,
        'message': 'Invalid data provided',
        'errors': serializer.errors
    }, status=status.HTTP_400_BAD_REQUEST)


# Stock movements

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_movements(request, product_id):
    """
    Get stock movement history for a product
    GET /inventory/stock-movements/<product_id>
    """
    product = get_object_or_404(Product, id=product_id)
    movements = StockMovement.objects.select_related('product', 'created_by').filter(
        product=product
    ).order_by('-created_at')
    serializer = StockMovementSerializer(movements, many=True)

    return Response({
        'success': True,
        'product_name': product.name,
        'current_stock': product.quantity,
        'stock_movements': serializer.data
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def movement_journal(request):
    """
    Recent stock operations with author filter and pagination
    GET /inventory/movements
    GET /inventory/movements?author=<user_id>
    """
    try:
        recent_ids = list(
            StockMovement.objects.order_by('-created_at', '-id')
            .values_list('id', flat=True)[:JOURNAL_LIMIT]
        )
        recent = StockMovement.objects.select_related('product', 'created_by').filter(
            id__in=recent_ids
        ).order_by('-created_at', '-id')

        # Authors are listed from the whole recent window, before filtering
        authors = {}
        for movement in recent:
            author_id = movement.created_by_id or 'system'
            if author_id not in authors:
                authors[author_id] = movement.author_name

        filterset = StockMovementFilter(request.query_params, queryset=recent)
        if not filterset.is_valid():
            return Response({
                'success': False,
                'message': 'Invalid filters',
                'errors': filterset.errors
            }, status=status.HTTP_400_BAD_REQUEST)

        paginator = MovementPagination()
        page = paginator.paginate_queryset(filterset.qs, request)
        serializer = StockMovementSerializer(page, many=True)

        return Response({
            'success': True,
            'pagination': {
                'count': paginator.page.paginator.count,
                'current_page': paginator.page.number,
                'total_pages': paginator.page.paginator.num_pages,
                'next': paginator.get_next_link(),
                'previous': paginator.get_previous_link(),
            },
            'authors': [{'id': pk, 'name': name} for pk, name in authors.items()],
            'movements': serializer.data
        })

    except NotFound:
        raise

    except Exception as e:
        logger.error(f"Error retrieving stock movements: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to retrieve stock movements',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
