# users/urls.py

from django.urls import path

from .views import AdminUserListView, ProfileImageView, ProfileView, UserRoleView

urlpatterns = [
    path('', AdminUserListView.as_view(), name='user-list'),
    path('profile/', ProfileView.as_view(), name='user-profile'),
    path('profile/image/', ProfileImageView.as_view(), name='user-profile-image'),
    path('<int:user_id>/role/', UserRoleView.as_view(), name='user-role'),
]
