from django.urls import path
from . import views

app_name = 'meetup_booking'

urlpatterns = [
    # Point d'entrée des actions AJAX (inscription, réservation, annulation)
    path('ajax/', views.AjaxView.as_view(), name='ajax'),
]
