from django.urls import path

from . import views

urlpatterns = [
    path('templates/', views.TemplateListCreateView.as_view(), name='course-file-templates'),
    path('templates/<int:id>/', views.TemplateDetailView.as_view(), name='course-file-template-detail'),

    path('assignments/', views.AssignmentCreateView.as_view(), name='course-file-assignment-create'),
    path('assignments/<int:id>/', views.AssignmentDetailView.as_view(), name='course-file-assignment-detail'),
    path('assignments/<int:id>/progress/', views.AssignmentProgressView.as_view(), name='course-file-assignment-progress'),
    path('assignments/<int:id>/batch-review/', views.AssignmentBatchReviewView.as_view(), name='course-file-batch-review'),
    path('assignments/<int:id>/review-tasks/', views.AssignmentReviewTasksView.as_view(), name='course-file-review-tasks'),
    path('assignments/<int:id>/logs/', views.AssignmentLogsView.as_view(), name='course-file-assignment-logs'),
    path('sections/<int:id>/assignments/', views.SectionAssignmentsView.as_view(), name='course-file-section-assignments'),

    path('tasks/mine/', views.MyTasksView.as_view(), name='course-file-my-tasks'),
    path('tasks/<int:id>/complete/', views.TaskCompleteView.as_view(), name='course-file-task-complete'),
    path('tasks/<int:id>/revert/', views.TaskRevertView.as_view(), name='course-file-task-revert'),
    path('tasks/<int:id>/review/', views.TaskReviewView.as_view(), name='course-file-task-review'),
    path('tasks/<int:id>/deadline/', views.TaskDeadlineView.as_view(), name='course-file-task-deadline'),

    path('alerts/', views.ComplianceAlertsView.as_view(), name='course-file-alerts'),
    path('hod/compliance-summary/', views.HodComplianceSummaryView.as_view(), name='course-file-hod-summary'),
    path('hod/semesters/', views.HodSemestersView.as_view(), name='course-file-hod-semesters'),
    path('hod/semesters/<int:id>/subjects/', views.HodSemesterSubjectsView.as_view(), name='course-file-hod-semester-subjects'),

    path('logs/', views.ActivityLogView.as_view(), name='course-file-logs'),
]
