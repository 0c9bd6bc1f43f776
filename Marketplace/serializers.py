from rest_framework import serializers


class PaginationSerializer(serializers.Serializer):
    currentPage = serializers.IntegerField(source='current_page', min_value=1)
    totalPages = serializers.IntegerField(source='total_pages', min_value=0)
    totalCount = serializers.IntegerField(source='total_count', min_value=0)
    hasNextPage = serializers.BooleanField(source='has_next_page')
    hasPreviousPage = serializers.BooleanField(source='has_previous_page')


class ProductPageSerializer(serializers.Serializer):
    products = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    pagination = PaginationSerializer()


class ReviewEligibilitySerializer(serializers.Serializer):
    reviews = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    canReview = serializers.BooleanField(source='can_review', required=False, default=False)
    hasReviewed = serializers.BooleanField(source='has_reviewed', required=False, default=False)
    userReview = serializers.DictField(source='user_review', required=False, allow_null=True, default=None)
