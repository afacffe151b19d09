# portal/urls.py
from django.urls import path, include

urlpatterns = [
    path('', include('accounts.urls', namespace='accounts')),
    path('', include('jobs.urls', namespace='jobs')),
]

handler404 = 'portal.views.page_not_found'
handler500 = 'portal.views.server_error'
