from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response

from project.models import Project
from project.permission import Operation, ProjectAccessPermission
from task.activity_log import TASK_LOG
from task.adapters.filters.task_filter import TaskFilter
from task.adapters.serializers.task_serializer import TaskSerializer, TaskWriteSerializer
from task.models import Task
from user.identity import resolve_identity
from utils.custom_paginator import TaskPaginator
from utils.mutation_pipeline import MutationPipeline


class TaskViewSet(viewsets.ModelViewSet):
    """
    Tasks nested under ``projects/{project_pk}/tasks``.

    Authorization for writes is keyed off the parent project's owner; a task
    has no owner of its own.
    """
    serializer_class = TaskSerializer
    pagination_class = TaskPaginator
    permission_classes = [ProjectAccessPermission]
    filter_backends = [DjangoFilterBackend]
    filterset_class = TaskFilter
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_project(self):
        if not hasattr(self, '_project'):
            self._project = get_object_or_404(Project, pk=self.kwargs['project_pk'])
        return self._project

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Task.objects.none()
        return Task.objects.filter(project=self.get_project())

    def get_serializer_class(self):
        if self.action in ('create', 'partial_update'):
            return TaskWriteSerializer
        return TaskSerializer

    def _pipeline(self):
        return MutationPipeline(resolve_identity(self.request.user), TASK_LOG)

    @extend_schema(request=TaskWriteSerializer, responses={201: TaskSerializer})
    def create(self, request, *args, **kwargs):
        project = self.get_project()
        pipeline = self._pipeline()
        pipeline.authorize(
            Operation.CREATE,
            owner_id=project.owner_id,
            message="Forbidden: only the project owner can create tasks",
        )

        write_serializer = self.get_serializer(data=request.data)
        write_serializer.is_valid(raise_exception=True)
        instance = pipeline.create(lambda: write_serializer.save(project=project))

        read_serializer = TaskSerializer(instance)
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @extend_schema(request=TaskWriteSerializer, responses={200: TaskSerializer})
    def partial_update(self, request, *args, **kwargs):
        instance = self.get_object()
        pipeline = self._pipeline()
        pipeline.authorize(
            Operation.UPDATE,
            owner_id=self.get_project().owner_id,
            message="Forbidden: only the project owner can update tasks",
        )

        write_serializer = self.get_serializer(instance, data=request.data, partial=True)
        write_serializer.is_valid(raise_exception=True)
        instance = pipeline.update(instance, write_serializer.validated_data, write_serializer.save)

        return Response(TaskSerializer(instance).data)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        pipeline = self._pipeline()
        pipeline.authorize(
            Operation.DELETE,
            owner_id=self.get_project().owner_id,
            message="Forbidden: only the project owner can delete tasks",
        )

        pipeline.delete(instance)
        return Response({"message": "Task deleted"}, status=status.HTTP_200_OK)
