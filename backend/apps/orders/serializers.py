from rest_framework import serializers

from .models import Payment


class AddressInputSerializer(serializers.Serializer):
    fullName = serializers.CharField(source="full_name", max_length=150)
    phone = serializers.CharField(max_length=50)
    addressLine1 = serializers.CharField(source="address_line1", max_length=255)
    addressLine2 = serializers.CharField(
        source="address_line2", max_length=255, required=False, allow_blank=True, default=""
    )
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    postalCode = serializers.CharField(
        source="postal_code", max_length=20, required=False, allow_blank=True, default=""
    )
    country = serializers.CharField(max_length=100)


class CheckoutAddressesSerializer(serializers.Serializer):
    shipping = AddressInputSerializer()
    billingSameAsShipping = serializers.BooleanField(
        source="billing_same_as_shipping", default=True
    )
    billing = AddressInputSerializer(required=False)

    def validate(self, attrs):
        if not attrs.get("billing_same_as_shipping", True) and not attrs.get("billing"):
            raise serializers.ValidationError(
                {"billing": ["Required when billingSameAsShipping is false."]}
            )
        return attrs


class CheckoutSerializer(serializers.Serializer):
    addresses = CheckoutAddressesSerializer(required=False)
    paymentMethod = serializers.ChoiceField(
        source="payment_method", choices=Payment.Method.choices, default=Payment.Method.COD
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)


class AddressSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    kind = serializers.CharField()
    fullName = serializers.CharField(source="full_name")
    phone = serializers.CharField()
    addressLine1 = serializers.CharField(source="address_line1")
    addressLine2 = serializers.CharField(source="address_line2")
    city = serializers.CharField()
    state = serializers.CharField()
    postalCode = serializers.CharField(source="postal_code")
    country = serializers.CharField()


class OrderItemSerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id", allow_null=True)
    productName = serializers.CharField(source="product_name")
    quantity = serializers.IntegerField()
    unitPrice = serializers.CharField(source="unit_price")
    subtotal = serializers.CharField()


class PaymentSerializer(serializers.Serializer):
    method = serializers.CharField()
    status = serializers.CharField()
    amount = serializers.CharField()


class OrderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    orderNumber = serializers.CharField(source="order_number")
    status = serializers.CharField()
    paymentStatus = serializers.CharField(source="payment_status")
    totalAmount = serializers.CharField(source="total_amount")
    userEmail = serializers.CharField(source="user_email")
    notes = serializers.CharField()
    createdAt = serializers.CharField(source="created_at")
    items = OrderItemSerializer(many=True)
    payment = PaymentSerializer(allow_null=True)
    shippingAddress = AddressSerializer(source="shipping_address", allow_null=True)
    billingAddress = AddressSerializer(source="billing_address", allow_null=True)


class OrderSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    orderNumber = serializers.CharField(source="order_number")
    status = serializers.CharField()
    paymentStatus = serializers.CharField(source="payment_status")
    totalAmount = serializers.CharField(source="total_amount")
    itemCount = serializers.IntegerField(source="item_count")
    createdAt = serializers.CharField(source="created_at")
