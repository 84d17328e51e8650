from django.urls import path
from . import views, views_members, views_slots

app_name = 'dashboard'

urlpatterns = [
    # ── Core ──────────────────────────────────────────────────────────────
    path('',                                     views.overview,       name='overview'),
    path('bookings/',                            views.booking_list,   name='booking_list'),
    path('bookings/new/',                        views.booking_create, name='booking_create'),
    path('bookings/<uuid:booking_id>/edit/',     views.booking_edit,   name='booking_edit'),
    path('bookings/<uuid:booking_id>/delete/',   views.booking_delete, name='booking_delete'),
    path('bookings/<uuid:booking_id>/status/',   views.booking_status, name='booking_status'),

    # ── Member CRUD ───────────────────────────────────────────────────────
    path('members/',                       views_members.member_list,   name='member_list'),
    path('members/new/',                   views_members.member_create, name='member_create'),
    path('members/<uuid:pk>/edit/',        views_members.member_edit,   name='member_edit'),
    path('members/<uuid:pk>/delete/',      views_members.member_delete, name='member_delete'),

    # ── Slot editor ───────────────────────────────────────────────────────
    path('slots/',                         views_slots.slot_editor,  name='slot_editor'),
    path('slots/<str:day>/toggle/',        views_slots.slot_toggle,  name='slot_toggle'),
    path('slots/<str:day>/save/',          views_slots.slot_save,    name='slot_save'),
    path('slots/<str:day>/discard/',       views_slots.slot_discard, name='slot_discard'),
]
