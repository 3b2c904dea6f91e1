from django.urls import path, include
from django.contrib import admin
from django.views.generic import RedirectView
from django.http import HttpResponse

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False), name='db-dashboard'),
    path('favicon.ico', lambda request: HttpResponse(status=204), name='favicon'),
    path('admin/', admin.site.urls),
    path('api/accounts/', include('accounts.urls')),
    path('api/course-files/', include('course_files.urls')),
]
