from rest_framework import serializers
from project.models import ProjectActivityLog


class ProjectActivityLogSerializer(serializers.ModelSerializer):
    project_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = ProjectActivityLog
        fields = ['id', 'project_id', 'task_id', 'action', 'message', 'created_at']
        read_only_fields = fields


class ActivityFeedSerializer(ProjectActivityLogSerializer):
    """Entries of the cross-project feed, each carrying its project's name."""
    project_name = serializers.CharField(read_only=True)

    class Meta(ProjectActivityLogSerializer.Meta):
        fields = ProjectActivityLogSerializer.Meta.fields + ['project_name']
        read_only_fields = fields
