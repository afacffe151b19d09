# jobs/urls.py
from django.urls import path
from . import views

app_name = 'jobs'

urlpatterns = [
    path('', views.home, name='home'),
    path('api/health', views.health, name='health'),

    # job role listing / detail
    path('job-roles', views.job_role_list, name='job_role_list'),
    path('jobs/search', views.job_role_search, name='job_role_search'),
    path('job-roles/<str:job_role_id>', views.job_role_resource, name='job_role_detail'),   # GET, DELETE (ajax)
    path('job-roles/<str:job_role_id>/delete', views.job_role_delete, name='job_role_delete'),

    # application flow
    path('job-roles/<str:job_role_id>/apply', views.application_form, name='job_role_apply'),
    path('my-applications', views.my_applications, name='my_applications'),

    # admin: applicants
    path('job-roles/<str:job_role_id>/applicants', views.applicant_list, name='applicant_list'),
    path('job-roles/<str:job_role_id>/applications/<str:application_id>/accept',
         views.accept_applicant, name='accept_applicant'),
    path('job-roles/<str:job_role_id>/applications/<str:application_id>/reject',
         views.reject_applicant, name='reject_applicant'),
    path('applications/<str:application_id>/cv', views.download_cv, name='download_cv'),

    # admin: job role management; fixed paths before the <id> catch-all
    path('admin/job-roles/new', views.job_role_create, name='job_role_create'),
    path('admin/job-roles/export', views.export_job_roles, name='export_job_roles'),
    path('admin/job-roles', views.job_role_create_submit, name='job_role_create_submit'),
    path('admin/job-roles/<str:job_role_id>/edit', views.job_role_edit, name='job_role_edit'),
    path('admin/job-roles/<str:job_role_id>', views.job_role_update, name='job_role_update'),
]
