from frete.logic.delivery_fee import DeliveryFeeEstimator
from frete.providers.api_client import ApiError, DeliveryApiClient
from frete.providers.tariff_provider import get_tariff_provider
from frete.utils.geo import AUTLAN_CENTER, haversine_distance

print("--- INICIANDO TESTE DA TARIFA DE ENTREGA ---")

client = DeliveryApiClient()
print(f"1. API: {client.base_url}")

try:
    raw = client.get_delivery_config()
    print(f"✅ Tarifa recebida: {raw}")
except ApiError as e:
    print("❌ FALHA! Não foi possível buscar a tarifa.")
    print(f"\n   ERRO DETALHADO: {e}")

print("\n2. Simulando entrega a partir do centro...")
estimator = DeliveryFeeEstimator(get_tariff_provider(client))
destination = (19.7800, -104.3636)
distance = haversine_distance(AUTLAN_CENTER[0], AUTLAN_CENTER[1], *destination)
print(f"   Distância: {distance:.2f} km")
print(f"   Taxa: ${estimator.calculate_delivery_fee(distance):.2f}")
print(f"   Tempo estimado: {estimator.estimate_delivery_time(distance)} min")

print("\n--- TESTE DA TARIFA FINALIZADO ---")
