from rest_framework import serializers


class CartItemCandidateSerializer(serializers.Serializer):
    """A product offered to the cart, before it has a quantity."""
    id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.FloatField(min_value=0)
    originalPrice = serializers.FloatField(source='original_price', required=False, allow_null=True, min_value=0)
    image = serializers.CharField(required=False, allow_blank=True, default='')
    seller = serializers.CharField()
    inStock = serializers.BooleanField(source='in_stock', required=False, default=True)
    freeShipping = serializers.BooleanField(source='free_shipping', required=False, allow_null=True, default=None)


class CartLineItemSerializer(CartItemCandidateSerializer):
    """Stored shape of a cart line, as written under the "cart" storage key."""
    quantity = serializers.IntegerField(min_value=1)

    def validate_id(self, value):
        if not value.strip():
            raise serializers.ValidationError('Product id is required')
        return value
