from django.urls import path, include
from rest_framework.routers import DefaultRouter

from project.adapters.viewset.project_activity_viewset import ActivityFeedViewSet
from project.adapters.viewset.project_viewset import ProjectViewSet


router = DefaultRouter(trailing_slash=False)
router.register(r'projects', ProjectViewSet, basename='project')
router.register(r'activity', ActivityFeedViewSet, basename='activity')

urlpatterns = [
    path('', include(router.urls)),
]
