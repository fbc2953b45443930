from django.db.models import Count
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from project import activity_store
from project.activity_log import PROJECT_LOG
from project.adapters.serializers.project_activity_log_serializer import ProjectActivityLogSerializer
from project.adapters.serializers.project_serializer import ProjectSerializer, ProjectWriteSerializer
from project.models import Project
from project.permission import Operation, ProjectAccessPermission
from user.identity import resolve_identity
from utils.custom_paginator import ActivityPaginator
from utils.mutation_pipeline import MutationPipeline


class ProjectViewSet(viewsets.ModelViewSet):
    """
    Projects API with:
    - cookie JWT auth
    - reads open to any authenticated user
    - writes gated by role and ownership through the mutation pipeline
    - every write recorded in the project's activity log
    - read/write serializer switching
    """
    serializer_class = ProjectSerializer
    pagination_class = None
    permission_classes = [ProjectAccessPermission]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        # Every project system-wide, not just the caller's own.
        return Project.objects.annotate(task_count=Count('tasks')).order_by('-created_at', '-id')

    def get_serializer_class(self):
        if self.action in ("create", "partial_update"):
            return ProjectWriteSerializer
        return self.serializer_class

    def _pipeline(self):
        return MutationPipeline(resolve_identity(self.request.user), PROJECT_LOG)

    @extend_schema(request=ProjectWriteSerializer, responses={201: ProjectSerializer})
    def create(self, request, *args, **kwargs):
        pipeline = self._pipeline()
        pipeline.authorize(Operation.CREATE, message="Forbidden: read-only users cannot create projects")

        write_serializer = self.get_serializer(data=request.data)
        write_serializer.is_valid(raise_exception=True)
        instance = pipeline.create(lambda: write_serializer.save(owner_id=pipeline.identity.id))

        read_serializer = ProjectSerializer(instance)
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @extend_schema(request=ProjectWriteSerializer, responses={200: ProjectSerializer})
    def partial_update(self, request, *args, **kwargs):
        instance = self.get_object()
        pipeline = self._pipeline()
        pipeline.authorize(
            Operation.UPDATE,
            owner_id=instance.owner_id,
            message="Forbidden: only the project owner can edit this project",
        )

        write_serializer = self.get_serializer(instance, data=request.data, partial=True)
        write_serializer.is_valid(raise_exception=True)
        instance = pipeline.update(instance, write_serializer.validated_data, write_serializer.save)

        return Response(ProjectSerializer(instance).data)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        pipeline = self._pipeline()
        pipeline.authorize(
            Operation.DELETE,
            owner_id=instance.owner_id,
            message="Forbidden: only the project owner can delete this project",
        )

        # tasks go with it through the foreign key cascade
        pipeline.delete(instance)
        return Response({"message": "Project deleted"}, status=status.HTTP_200_OK)

    @extend_schema(responses={200: ProjectActivityLogSerializer(many=True)})
    @action(
        detail=True,
        methods=["get"],
        url_path="activity",
        serializer_class=ProjectActivityLogSerializer,
        pagination_class=ActivityPaginator,
    )
    def activity(self, request, pk=None):
        """Activity entries of one project, newest first."""
        project = self.get_object()
        queryset = activity_store.for_project(project.pk)

        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)
