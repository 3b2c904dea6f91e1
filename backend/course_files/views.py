from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView, exception_handler

from academics.permissions import IsHODOfDepartment, IsHODOrReadOnly
from course_files import serializers as cf_serializers
from course_files.services import (
    assignment_registry,
    audit_log,
    batch_review,
    compliance,
    task_state,
    template_catalog,
)
from course_files.services.actor import Actor


def custom_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is not None:
        if not isinstance(response.data, dict):
            response.data = {'detail': response.data}
        response.data['status_code'] = response.status_code
        if isinstance(exc, ValidationError):
            response.data.setdefault('code', 'invalid')
        else:
            response.data['detail'] = str(exc.detail) if hasattr(exc, 'detail') else str(exc)
            response.data['code'] = getattr(exc, 'default_code', 'error')

    return response


def _actor(request) -> Actor:
    return Actor.for_user(request.user)


class TemplateListCreateView(APIView):
    permission_classes = (IsHODOrReadOnly,)

    def get(self, request, *args, **kwargs):
        include_inactive = request.query_params.get('include_inactive') in ('1', 'true', 'True')
        templates = template_catalog.list_templates(include_inactive=include_inactive)
        return Response(cf_serializers.TaskTemplateSerializer(templates, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = cf_serializers.TaskTemplateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        template = template_catalog.create_template(
            _actor(request),
            title=data['title'],
            description=data.get('description', ''),
            order=data.get('order'),
        )
        return Response(cf_serializers.TaskTemplateSerializer(template).data, status=status.HTTP_201_CREATED)


class TemplateDetailView(APIView):
    permission_classes = (IsHODOrReadOnly,)

    def patch(self, request, id: int, *args, **kwargs):
        serializer = cf_serializers.TaskTemplateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        template = template_catalog.update_template(id, _actor(request), **serializer.validated_data)
        return Response(cf_serializers.TaskTemplateSerializer(template).data)

    def delete(self, request, id: int, *args, **kwargs):
        deleted = template_catalog.remove_template(id, _actor(request))
        return Response({'id': id, 'deleted': deleted, 'deactivated': not deleted})


class AssignmentCreateView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, *args, **kwargs):
        serializer = cf_serializers.AssignmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        assignment = assignment_registry.create_assignment(
            data['subject_id'],
            data['faculty_id'],
            data['section_id'],
            _actor(request),
            deadlines=serializer.deadline_map(),
        )
        body = cf_serializers.AssignmentSerializer(assignment).data
        body['task_count'] = assignment.tasks.count()
        return Response(body, status=status.HTTP_201_CREATED)


class AssignmentDetailView(APIView):
    permission_classes = (IsAuthenticated,)

    def delete(self, request, id: int, *args, **kwargs):
        assignment_registry.delete_assignment(id, _actor(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class AssignmentProgressView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int, *args, **kwargs):
        return Response(compliance.assignment_progress(id, _actor(request)))


class AssignmentBatchReviewView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, id: int, *args, **kwargs):
        serializer = cf_serializers.ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        count = batch_review.batch_review_as_hod(
            id,
            _actor(request),
            serializer.validated_data['status'],
            remarks=serializer.validated_data.get('remarks'),
        )
        return Response({'assignment_id': id, 'count': count})


class AssignmentReviewTasksView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int, *args, **kwargs):
        result = compliance.hod_reviewable_tasks(id, _actor(request))
        assignment = result['assignment']
        return Response({
            'assignment': {
                'id': assignment.id,
                'subject': assignment.subject.name,
                'faculty': assignment.faculty.display_name,
                'class': assignment.section.name,
            },
            'tasks': cf_serializers.ReviewableTaskSerializer(result['tasks'], many=True).data,
        })


class AssignmentLogsView(APIView):
    permission_classes = (IsHODOfDepartment,)

    def get(self, request, id: int, *args, **kwargs):
        entries = audit_log.assignment_entries(id, _actor(request))
        return Response(cf_serializers.CourseFileLogSerializer(entries, many=True).data)


class SectionAssignmentsView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int, *args, **kwargs):
        assignments = assignment_registry.list_section_assignments(id, _actor(request))
        return Response(cf_serializers.AssignmentSerializer(assignments, many=True).data)


class MyTasksView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        tasks = assignment_registry.list_faculty_tasks(_actor(request))
        return Response(cf_serializers.TaskSerializer(tasks, many=True).data)


class TaskCompleteView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, id: int, *args, **kwargs):
        task = task_state.complete(id, _actor(request))
        return Response(cf_serializers.TaskSerializer(task).data)


class TaskRevertView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, id: int, *args, **kwargs):
        task = task_state.revert(id, _actor(request))
        return Response(cf_serializers.TaskSerializer(task).data)


class TaskReviewView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, id: int, *args, **kwargs):
        serializer = cf_serializers.ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        task = task_state.review(
            id,
            _actor(request),
            serializer.validated_data['status'],
            remarks=serializer.validated_data.get('remarks'),
        )
        return Response(cf_serializers.TaskSerializer(task).data)


class TaskDeadlineView(APIView):
    permission_classes = (IsAuthenticated,)

    def patch(self, request, id: int, *args, **kwargs):
        serializer = cf_serializers.DeadlineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        task = task_state.update_deadline(id, _actor(request), serializer.validated_data['deadline'])
        return Response(cf_serializers.TaskSerializer(task).data)


class ComplianceAlertsView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        alerts = compliance.compliance_alerts(_actor(request))
        return Response(cf_serializers.AlertSerializer(alerts, many=True).data)


class HodComplianceSummaryView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        return Response(compliance.department_compliance_summary(_actor(request)))


class HodSemestersView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        return Response(compliance.hod_semesters(_actor(request)))


class HodSemesterSubjectsView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int, *args, **kwargs):
        return Response(compliance.hod_semester_subjects(id, _actor(request)))


class ActivityLogView(APIView):
    permission_classes = (IsHODOfDepartment,)

    def get(self, request, *args, **kwargs):
        entries = audit_log.recent_entries(_actor(request))
        return Response(cf_serializers.CourseFileLogSerializer(entries, many=True).data)
