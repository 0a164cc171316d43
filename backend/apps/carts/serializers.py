from rest_framework import serializers


class CartLineSerializer(serializers.Serializer):
    # Matches CartLineDTO; camelCase on the wire
    productId = serializers.IntegerField(source="product_id")
    ownerId = serializers.IntegerField(source="owner_id")
    quantity = serializers.IntegerField()
    title = serializers.CharField()
    price = serializers.CharField()
    image = serializers.CharField()


class CartSummarySerializer(serializers.Serializer):
    items = CartLineSerializer(many=True)
    totalItems = serializers.IntegerField(source="total_items")
    totalPrice = serializers.CharField(source="total_price")


class CartItemAddSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)


class CartLineRemovedSerializer(serializers.Serializer):
    removed = serializers.BooleanField()
    productId = serializers.IntegerField()
