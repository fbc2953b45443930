import django_filters
from django.db.models import Case, F, IntegerField, Q, Value, When

from task.models import Priority, Status, Task

SORT_FIELDS = {
    'createdAt': 'created_at',
    'dueDate': 'due_date',
    'priority': 'priority_rank',
    'status': 'status_rank',
}
DEFAULT_SORT = 'createdAt'


def _rank(field, choices):
    """Order choice values by declaration, not alphabetically."""
    return Case(
        *[When(**{field: value}, then=Value(index)) for index, value in enumerate(choices.values)],
        output_field=IntegerField(),
    )


class CommaSeparatedChoiceFilter(django_filters.CharFilter):
    """
    ``?status=TODO,DONE`` style allow-list. Unknown values are dropped; when
    none survive no filter is applied.
    """

    def __init__(self, *args, choices=None, **kwargs):
        self.allowed = set(choices.values)
        super().__init__(*args, **kwargs)

    def filter(self, qs, value):
        if not value:
            return qs
        values = [v for v in value.split(',') if v in self.allowed]
        if not values:
            return qs
        return qs.filter(**{f'{self.field_name}__in': values})


class TaskFilter(django_filters.FilterSet):
    status = CommaSeparatedChoiceFilter(field_name='status', choices=Status)
    priority = CommaSeparatedChoiceFilter(field_name='priority', choices=Priority)
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Task
        fields = ['status', 'priority', 'search']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        return self.sort(queryset)

    def sort(self, queryset):
        sort_by = self.data.get('sortBy') or DEFAULT_SORT
        field = SORT_FIELDS.get(sort_by, SORT_FIELDS[DEFAULT_SORT])
        descending = self.data.get('sortOrder') != 'asc'

        queryset = queryset.annotate(
            priority_rank=_rank('priority', Priority),
            status_rank=_rank('status', Status),
        )
        if descending:
            order = F(field).desc(nulls_first=True)
        else:
            order = F(field).asc(nulls_last=True)
        tiebreak = '-id' if descending else 'id'
        return queryset.order_by(order, tiebreak)
