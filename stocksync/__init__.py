"""Inventory feed to WooCommerce stock synchronisation."""
