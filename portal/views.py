# portal/views.py
from django.shortcuts import render


def page_not_found(request, exception=None):
    return render(request, 'error.html', {
        'message': "The page you're looking for could not be found.",
    }, status=404)


def server_error(request):
    return render(request, 'error.html', {
        'message': "Something went wrong on our side. Please try again later.",
    }, status=500)
