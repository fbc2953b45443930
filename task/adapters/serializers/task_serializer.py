from django.utils.dateparse import parse_datetime
from rest_framework import serializers

from task.models import Task


class DueDateField(serializers.DateField):
    """A date that also accepts a full ISO datetime and keeps only its date part."""

    def to_internal_value(self, value):
        if isinstance(value, str) and 'T' in value:
            try:
                parsed = parse_datetime(value)
            except ValueError:
                parsed = None
            if parsed is None:
                self.fail('invalid', format='YYYY-MM-DD')
            return parsed.date()
        return super().to_internal_value(value)


class TaskSerializer(serializers.ModelSerializer):
    project_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Task
        fields = (
            'id',
            'project_id',
            'title',
            'description',
            'status',
            'priority',
            'due_date',
            'created_at',
            'updated_at',
        )


class TaskWriteSerializer(serializers.ModelSerializer):
    title = serializers.CharField(
        max_length=255,
        error_messages={
            'blank': 'Task title is required',
            'required': 'Task title is required',
            'max_length': 'Title too long',
        },
    )
    description = serializers.CharField(
        max_length=2000,
        required=False,
        allow_null=True,
        allow_blank=True,
        error_messages={'max_length': 'Description too long'},
    )
    due_date = DueDateField(required=False, allow_null=True)

    class Meta:
        model = Task
        fields = (
            'title',
            'description',
            'status',
            'priority',
            'due_date',
        )

    def validate_description(self, value):
        return value or None
