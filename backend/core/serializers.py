from rest_framework import serializers


class PageSerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, default=50)
    offset = serializers.IntegerField(min_value=0, default=0)


def page_params(request):
    serializer = PageSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data["limit"], serializer.validated_data["offset"]
