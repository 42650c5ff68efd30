from django.urls import path
from . import views

app_name = 'expenses'

urlpatterns = [
    # GET  /api/groups/balances/                 - My balance in each of my groups
    # GET  /api/groups/{group_id}/expenses/      - Expense log, newest first
    # POST /api/groups/{group_id}/expenses/      - Log an expense
    # GET  /api/groups/{group_id}/balances/      - Net balance per current member
    path('balances/', views.my_balances, name='my-balances'),
    path('<uuid:group_id>/expenses/', views.group_expenses, name='group-expenses'),
    path('<uuid:group_id>/balances/', views.group_balances, name='group-balances'),
]
