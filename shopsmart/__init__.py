"""ShopSmart orders backend."""
