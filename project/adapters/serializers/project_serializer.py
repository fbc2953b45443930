from rest_framework import serializers
from project.models import Project


class ProjectSerializer(serializers.ModelSerializer):
    task_count = serializers.SerializerMethodField()
    owner_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Project
        fields = ('id', 'name', 'description', 'owner_id', 'task_count', 'created_at', 'updated_at')

    def get_task_count(self, obj) -> int:
        # list and detail querysets annotate it; freshly written projects don't
        if hasattr(obj, "task_count"):
            return obj.task_count
        return obj.tasks.count()


class ProjectWriteSerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        max_length=255,
        error_messages={
            'blank': 'Project name is required',
            'required': 'Project name is required',
            'max_length': 'Name too long',
        },
    )
    description = serializers.CharField(
        max_length=1000,
        required=False,
        allow_null=True,
        allow_blank=True,
        error_messages={'max_length': 'Description too long'},
    )

    class Meta:
        model = Project
        fields = ('name', 'description')

    def validate_description(self, value):
        # blank and missing descriptions are the same thing
        return value or None
