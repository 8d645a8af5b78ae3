from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404
from django.db import transaction
import logging

from activity.utils import log_activity
from inventory.models import Product, StockMovement
from sales.models import Sale, SaleLine
from sales.serializers import SaleDetailSerializer
from sales.signals import sale_completed
from .models import Cart, CartItem
from .serializers import CartSerializer, AddToCartSerializer, UpdateCartItemSerializer

logger = logging.getLogger(__name__)


def get_or_create_cart(user):
    """
    Get or create cart for user
    """
    cart, created = Cart.objects.get_or_create(user=user)
    return cart


def cart_response(cart, request, message=None, status_code=status.HTTP_200_OK):
    data = {
        'success': True,
        'cart': CartSerializer(cart, context={'request': request}).data
    }
    if message:
        data['message'] = message
    return Response(data, status=status_code)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def add_to_cart(request):
    """
    Add a product to cart, or increase its quantity
    POST /cart/add/
    """
    serializer = AddToCartSerializer(data=request.data)

    if not serializer.is_valid():
        return Response({
            'success': False,
            'message': 'Invalid data provided',
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    product = get_object_or_404(Product, id=serializer.validated_data['product_id'])
    quantity = serializer.validated_data['quantity']

    if product.is_archived:
        return Response({
            'success': False,
            'message': 'Product is archived'
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        with transaction.atomic():
            cart = get_or_create_cart(request.user)
            cart_item = cart.cart_items.filter(product=product).first()
            in_cart = cart_item.quantity if cart_item else 0

            if in_cart + quantity > product.quantity:
                return Response({
                    'success': False,
                    'message': 'Insufficient stock',
                    'available': product.quantity,
                    'in_cart': in_cart
                }, status=status.HTTP_400_BAD_REQUEST)

            if cart_item:
                cart_item.quantity = in_cart + quantity
                cart_item.save()
                message = f"Updated quantity of {product.name} in cart"
            else:
                CartItem.objects.create(cart=cart, product=product, quantity=quantity)
                message = f"Added {product.name} to cart"

        logger.info(f"Cart updated for user {request.user.username}: {message}")

        return cart_response(cart, request, message, status.HTTP_201_CREATED)

    except Exception as e:
        logger.error(f"Error adding product to cart: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to add product to cart',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cart_info(request):
    """
    Get current cart information
    GET /cart/info/
    """
    try:
        cart = get_or_create_cart(request.user)
        return cart_response(cart, request)

    except Exception as e:
        logger.error(f"Error retrieving cart info: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to retrieve cart information',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def remove_from_cart(request, product_id):
    """
    Remove a product from cart
    DELETE /cart/remove/<product_id>/
    """
    cart = get_or_create_cart(request.user)
    cart_item = get_object_or_404(CartItem, cart=cart, product_id=product_id)

    product_name = cart_item.product.name
    cart_item.delete()

    logger.info(f"Removed {product_name} from cart for user {request.user.username}")

    return cart_response(cart, request, f'Removed {product_name} from cart')


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def update_cart_item(request, product_id):
    """
    Set a cart line quantity, or shift it by a delta
    PUT /cart/update/<product_id>/  {"quantity": 3} or {"delta": -1}
    """
    cart = get_or_create_cart(request.user)
    cart_item = get_object_or_404(
        CartItem.objects.select_related('product'), cart=cart, product_id=product_id
    )

    serializer = UpdateCartItemSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            'success': False,
            'message': 'Invalid data provided',
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    if cart_item.product.is_archived:
        return Response({
            'success': False,
            'message': 'Product is archived'
        }, status=status.HTTP_400_BAD_REQUEST)

    new_quantity = serializer.target_quantity(cart_item.quantity)

    if new_quantity > cart_item.product.quantity:
        return Response({
            'success': False,
            'message': 'Maximum stock reached',
            'available': cart_item.product.quantity
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        cart_item.quantity = new_quantity
        cart_item.save()

        logger.info(
            f"Cart item {cart_item.product.name} set to {new_quantity} for user {request.user.username}"
        )

        return cart_response(cart, request, 'Cart item updated successfully')

    except ValidationError as e:
        return Response({
            'success': False,
            'message': 'Failed to update cart item',
            'errors': e.messages
        }, status=status.HTTP_400_BAD_REQUEST)

    except Exception as e:
        logger.error(f"Error updating cart item: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to update cart item',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def checkout_cart(request):
    """
    Turn the cart into a sale and take the units out of stock
    POST /cart/checkout/
    """
    user = request.user

    try:
        with transaction.atomic():
            cart = get_or_create_cart(user)
            cart_items = list(cart.cart_items.order_by('id'))

            if not cart_items:
                return Response({
                    'success': False,
                    'message': 'Cart is empty'
                }, status=status.HTTP_400_BAD_REQUEST)

            # Lock the product rows until the sale is committed
            products = Product.objects.select_for_update().in_bulk(
                [cart_item.product_id for cart_item in cart_items]
            )

            unavailable_items = [
                products[cart_item.product_id].name
                for cart_item in cart_items
                if products[cart_item.product_id].is_archived
                or products[cart_item.product_id].quantity < cart_item.quantity
            ]

            if unavailable_items:
                return Response({
                    'success': False,
                    'message': 'Some products are no longer available',
                    'unavailable_items': unavailable_items
                }, status=status.HTTP_400_BAD_REQUEST)

            sale = Sale.objects.create(seller=user, seller_name=user.display_name)

            for cart_item in cart_items:
                product = products[cart_item.product_id]

                SaleLine.objects.create(
                    sale=sale,
                    product=product,
                    product_name=product.name,
                    product_sku=product.sku,
                    quantity=cart_item.quantity,
                    unit_price=product.unit_price
                )

                product.apply_movement(StockMovement.TYPE_OUT, cart_item.quantity, 'sale', user)

            sale.calculate_totals()
            cart.clear()

            transaction.on_commit(lambda: sale_completed.send(sender=Sale, sale=sale))

    except ValidationError as e:
        return Response({
            'success': False,
            'message': 'Checkout failed',
            'errors': e.messages
        }, status=status.HTTP_400_BAD_REQUEST)

    except Exception as e:
        logger.error(f"Error during checkout: {str(e)}")
        return Response({
            'success': False,
            'message': 'Checkout failed',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    log_activity(user, 'checkout', {
        'sale_id': sale.id,
        'reference': sale.reference,
        'total': str(sale.total_amount),
        'item_count': sale.item_count,
    })

    logger.info(f"Sale created: {sale.reference} ({sale.total_amount}) by {user.username}")

    return Response({
        'success': True,
        'message': 'Sale completed successfully',
        'sale': SaleDetailSerializer(sale).data
    }, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def clear_cart(request):
    """
    Clear all items from cart
    DELETE /cart/clear/
    """
    try:
        cart = get_or_create_cart(request.user)
        items_count = cart.total_items
        cart.clear()

        logger.info(f"Cart cleared for user {request.user.username} - {items_count} items removed")

        return Response({
            'success': True,
            'message': f'Cart cleared successfully - {items_count} items removed'
        })

    except Exception as e:
        logger.error(f"Error clearing cart: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to clear cart',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cart_count(request):
    """
    Cart badge data
    GET /cart/count/
    """
    try:
        cart = get_or_create_cart(request.user)

        return Response({
            'success': True,
            'count': cart.total_items,
            'total_price': cart.total_price
        })

    except Exception as e:
        logger.error(f"Error getting cart count: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to get cart count',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
