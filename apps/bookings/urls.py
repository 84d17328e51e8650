"""
Booking flow URLs.

Flow:
  /booking/                         Step 1: Date selection
  /booking/time/                    Step 2: Time selection
  /booking/confirm/                 Step 3: Phone & confirm
  /booking/done/                    Booking requested page
  /booking/back/                    Back to date selection (POST)
  /booking/reset/                   Drop the draft (POST)
  /booking/<uuid>/edit/...          Same steps, editing an existing booking
  /my-bookings/                     Member's upcoming and past bookings
  /my-bookings/<uuid>/cancel/       Cancel (delete) an upcoming booking (POST)
"""
from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    # ── New booking ────────────────────────────────────────────────────────────
    path('booking/',                 views.step_date,    name='date'),
    path('booking/time/',            views.step_time,    name='time'),
    path('booking/confirm/',         views.step_confirm, name='confirm'),
    path('booking/done/',            views.step_done,    name='done'),
    path('booking/back/',            views.step_back,    name='back'),
    path('booking/reset/',           views.reset,        name='reset'),

    # ── Edit an existing booking ───────────────────────────────────────────────
    path('booking/<uuid:booking_id>/edit/',          views.step_date,    name='edit_date'),
    path('booking/<uuid:booking_id>/edit/time/',     views.step_time,    name='edit_time'),
    path('booking/<uuid:booking_id>/edit/confirm/',  views.step_confirm, name='edit_confirm'),
    path('booking/<uuid:booking_id>/edit/back/',     views.step_back,    name='edit_back'),
    path('booking/<uuid:booking_id>/edit/reset/',    views.reset,        name='edit_reset'),

    # ── My bookings ────────────────────────────────────────────────────────────
    path('my-bookings/',                             views.my_bookings,    name='my_bookings'),
    path('my-bookings/<uuid:booking_id>/cancel/',    views.cancel_booking, name='cancel'),
]
