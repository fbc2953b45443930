from django.urls import path, include
from rest_framework.routers import SimpleRouter

from task.adapters.viewset.task_viewset import TaskViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r'projects/(?P<project_pk>[^/.]+)/tasks', TaskViewSet, basename='project-task')

urlpatterns = [
    path('', include(router.urls)),
]
