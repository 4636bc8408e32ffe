from django.urls import path

from .views import CapacityValidateView, FinalPricingView, QuoteComputeView, ScenarioCompareView

app_name = 'pricing'

urlpatterns = [
    path('quote/compute', QuoteComputeView.as_view(), name='quote-compute'),
    path('capacity/validate', CapacityValidateView.as_view(), name='capacity-validate'),
    path('scenarios/compare', ScenarioCompareView.as_view(), name='scenarios-compare'),
    path('final-pricing', FinalPricingView.as_view(), name='final-pricing'),
]
