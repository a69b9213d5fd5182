"""Form 5 Readiness URL Configuration"""

# The readiness engine is consumed in-process by the submission handlers;
# it exposes no routes of its own.
urlpatterns = []
