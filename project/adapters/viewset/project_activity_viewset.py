from rest_framework import mixins, viewsets

from project import activity_store
from project.adapters.serializers.project_activity_log_serializer import ActivityFeedSerializer
from project.permission import ProjectAccessPermission
from utils.custom_paginator import ActivityFeedPaginator


class ActivityFeedViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Activity across every project the caller owns, newest first.

    Unlike the project list, this feed is scoped to the caller's projects.
    """
    serializer_class = ActivityFeedSerializer
    pagination_class = ActivityFeedPaginator
    permission_classes = [ProjectAccessPermission]

    def get_queryset(self):
        return activity_store.for_owner(self.request.user.id)
