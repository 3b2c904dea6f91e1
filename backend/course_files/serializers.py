from rest_framework import serializers

from course_files.models import CourseFileAssignment, CourseFileLog, TaskSubmission, TaskTemplate

DECISION_CHOICES = (TaskSubmission.ReviewStatus.YES, TaskSubmission.ReviewStatus.NO)


class TaskTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = TaskTemplate
        fields = ('id', 'title', 'description', 'order', 'is_active', 'created_at', 'updated_at')
        read_only_fields = ('id', 'created_at', 'updated_at')
        extra_kwargs = {
            'order': {'required': False},
            'is_active': {'required': False},
            'description': {'required': False},
        }


class TaskDeadlineItemSerializer(serializers.Serializer):
    template_id = serializers.IntegerField()
    deadline = serializers.DateTimeField()


class AssignmentCreateSerializer(serializers.Serializer):
    subject_id = serializers.IntegerField()
    faculty_id = serializers.IntegerField()
    section_id = serializers.IntegerField()
    task_deadlines = TaskDeadlineItemSerializer(many=True, required=False)

    def deadline_map(self):
        return {item['template_id']: item['deadline'] for item in self.validated_data.get('task_deadlines', [])}


class AssignmentSerializer(serializers.ModelSerializer):
    subject_name = serializers.CharField(source='subject.name', read_only=True)
    faculty_name = serializers.CharField(source='faculty.display_name', read_only=True)
    class_name = serializers.CharField(source='section.name', read_only=True)
    task_count = serializers.IntegerField(read_only=True, required=False)
    completed_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = CourseFileAssignment
        fields = (
            'id', 'subject', 'subject_name', 'faculty', 'faculty_name', 'section', 'class_name',
            'created_at', 'task_count', 'completed_count',
        )
        read_only_fields = fields


class TaskSerializer(serializers.ModelSerializer):
    template_id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(source='template.title', read_only=True)
    description = serializers.CharField(source='template.description', read_only=True)
    subject_name = serializers.CharField(source='assignment.subject.name', read_only=True)
    class_name = serializers.CharField(source='assignment.section.name', read_only=True)

    class Meta:
        model = TaskSubmission
        fields = (
            'id', 'assignment', 'template_id', 'title', 'description', 'subject_name', 'class_name',
            'deadline', 'status', 'completed_at',
            'cc_status', 'cc_remarks', 'cc_review_date',
            'hod_status', 'hod_remarks', 'hod_review_date',
            'updated_at',
        )
        read_only_fields = fields


class AlertSerializer(TaskSerializer):
    faculty_name = serializers.CharField(source='assignment.faculty.display_name', read_only=True)

    class Meta(TaskSerializer.Meta):
        fields = ('id', 'assignment', 'title', 'subject_name', 'class_name', 'faculty_name', 'deadline', 'status')
        read_only_fields = fields


class ReviewableTaskSerializer(TaskSerializer):
    is_reviewable = serializers.BooleanField(read_only=True)
    review_history = serializers.SerializerMethodField()

    class Meta(TaskSerializer.Meta):
        fields = TaskSerializer.Meta.fields + ('is_reviewable', 'review_history')
        read_only_fields = fields

    def get_review_history(self, obj):
        pending = TaskSubmission.ReviewStatus.PENDING
        return {
            'cc_reviewed': obj.cc_status != pending,
            'cc_status': obj.cc_status,
            'cc_review_date': obj.cc_review_date,
            'hod_reviewed': obj.hod_status != pending,
            'hod_status': obj.hod_status,
            'hod_review_date': obj.hod_review_date,
        }


class ReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DECISION_CHOICES)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DeadlineSerializer(serializers.Serializer):
    deadline = serializers.DateTimeField()


class CourseFileLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = CourseFileLog
        fields = (
            'id', 'action', 'message', 'actor', 'actor_name', 'assignment',
            'class_name', 'subject_name', 'task_title', 'metadata', 'created_at',
        )
        read_only_fields = fields
