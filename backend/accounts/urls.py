from django.urls import path
from . import views

urlpatterns = [
    path("register/", views.register_view, name="register"),
    path("profile/<str:wallet_address>/", views.profile_view, name="profile"),
]
