# Client-side services
