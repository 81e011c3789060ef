STORES = {
    "IntegrationStoreLocal": "integrations.integration_store_local",
    "IntegrationStoreSupabase": "integrations.integration_store_supabase",
}
