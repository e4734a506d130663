"""
URL configuration for TaskCatalyst project.
"""
from django.contrib import admin
from django.urls import path
from ninja import NinjaAPI

api = NinjaAPI(
    title="TaskCatalyst API",
    version="1.0.0",
    description="Task management with AI-generated catalyst micro-tasks",
    docs_url="/docs",
)

from apps.identity.api import router as identity_router
from apps.tasks.api import router as tasks_router
from apps.tasks.api import catalyst_router
from apps.tasks.api import analytics_router
from apps.engagement.api import router as engagement_router
from apps.billing.api import router as billing_router

api.add_router("/identity/", identity_router)
api.add_router("/tasks/", tasks_router)
api.add_router("/catalysts/", catalyst_router)
api.add_router("/analytics", analytics_router)
api.add_router("/activity-feed", engagement_router)
api.add_router("/billing/", billing_router)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
]
