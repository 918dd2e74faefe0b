"""데모용 웨어하우스 카탈로그 - 오디언스 스튜디오 기본 스키마."""

from typing import Any

from audience_query.core.catalog import Catalog


SAMPLE_CATALOG: dict[str, Any] = {
    "tables": [
        {
            "name": "users",
            "schemaNamespace": "public",
            "description": "Core user accounts table",
            "columns": [
                {"name": "id", "type": "SERIAL", "isPrimaryKey": True, "description": "Unique identifier"},
                {"name": "email", "type": "VARCHAR(255)", "description": "User email address"},
                {"name": "first_name", "type": "VARCHAR(100)", "description": "First name"},
                {"name": "last_name", "type": "VARCHAR(100)", "description": "Last name"},
                {"name": "date_of_birth", "type": "DATE", "description": "Birth date"},
                {"name": "status", "type": "VARCHAR(20)", "description": "Account status (active, inactive, suspended)"},
                {"name": "created_at", "type": "TIMESTAMP", "description": "Account creation date"},
                {"name": "updated_at", "type": "TIMESTAMP", "description": "Last update timestamp"},
            ],
            "sampleRows": [
                {"id": 1, "email": "john.anderson@example.com", "first_name": "John", "last_name": "Anderson", "date_of_birth": "1990-05-15", "status": "active", "created_at": "2024-01-15 10:30:00"},
                {"id": 2, "email": "sarah.mitchell@example.com", "first_name": "Sarah", "last_name": "Mitchell", "date_of_birth": "1996-08-22", "status": "active", "created_at": "2024-02-20 14:15:00"},
                {"id": 3, "email": "michael.chen@example.com", "first_name": "Michael", "last_name": "Chen", "date_of_birth": "1982-11-30", "status": "inactive", "created_at": "2023-06-10 09:00:00"},
                {"id": 4, "email": "emma.wilson@example.com", "first_name": "Emma", "last_name": "Wilson", "date_of_birth": "1994-03-08", "status": "active", "created_at": "2024-03-05 16:45:00"},
                {"id": 5, "email": "david.brown@example.com", "first_name": "David", "last_name": "Brown", "date_of_birth": "1988-12-01", "status": "suspended", "created_at": "2023-09-18 11:20:00"},
            ],
        },
        {
            "name": "orders",
            "schemaNamespace": "public",
            "description": "Customer orders and transactions",
            "columns": [
                {"name": "id", "type": "SERIAL", "isPrimaryKey": True, "description": "Order ID"},
                {"name": "user_id", "type": "INTEGER", "foreignKey": "users.id", "description": "Reference to user"},
                {"name": "order_date", "type": "TIMESTAMP", "description": "When order was placed"},
                {"name": "amount", "type": "DECIMAL(10,2)", "description": "Order subtotal"},
                {"name": "tax", "type": "DECIMAL(10,2)", "description": "Tax amount"},
                {"name": "shipping", "type": "DECIMAL(10,2)", "description": "Shipping cost"},
                {"name": "total_amount", "type": "DECIMAL(10,2)", "description": "Total with tax & shipping"},
                {"name": "status", "type": "VARCHAR(20)", "description": "Order status (pending, completed, cancelled, refunded)"},
            ],
            "sampleRows": [
                {"id": 101, "user_id": 1, "order_date": "2024-06-15 14:30:00", "amount": 150.00, "tax": 12.00, "shipping": 5.99, "total_amount": 167.99, "status": "completed"},
                {"id": 102, "user_id": 1, "order_date": "2024-07-20 09:15:00", "amount": 89.50, "tax": 7.16, "shipping": 0.00, "total_amount": 96.66, "status": "completed"},
                {"id": 103, "user_id": 2, "order_date": "2024-08-05 16:45:00", "amount": 245.00, "tax": 19.60, "shipping": 10.00, "total_amount": 274.60, "status": "completed"},
                {"id": 104, "user_id": 3, "order_date": "2024-03-10 11:00:00", "amount": 67.99, "tax": 5.44, "shipping": 5.99, "total_amount": 79.42, "status": "completed"},
                {"id": 105, "user_id": 4, "order_date": "2024-09-01 13:20:00", "amount": 320.00, "tax": 25.60, "shipping": 0.00, "total_amount": 345.60, "status": "pending"},
            ],
        },
        {
            "name": "subscriptions",
            "schemaNamespace": "public",
            "description": "User subscription plans",
            "columns": [
                {"name": "id", "type": "SERIAL", "isPrimaryKey": True, "description": "Subscription ID"},
                {"name": "user_id", "type": "INTEGER", "foreignKey": "users.id", "description": "Reference to user"},
                {"name": "plan_type", "type": "VARCHAR(50)", "description": "Plan name (Basic, Standard, Premium, Enterprise)"},
                {"name": "start_date", "type": "DATE", "description": "Subscription start"},
                {"name": "end_date", "type": "DATE", "description": "Subscription end (null if active)"},
                {"name": "monthly_price", "type": "DECIMAL(10,2)", "description": "Monthly subscription cost"},
                {"name": "status", "type": "VARCHAR(20)", "description": "Status (active, cancelled, expired)"},
            ],
            "sampleRows": [
                {"id": 1, "user_id": 1, "plan_type": "Premium", "start_date": "2024-01-01", "end_date": None, "monthly_price": 29.99, "status": "active"},
                {"id": 2, "user_id": 2, "plan_type": "Standard", "start_date": "2024-03-15", "end_date": None, "monthly_price": 14.99, "status": "active"},
                {"id": 3, "user_id": 3, "plan_type": "Basic", "start_date": "2023-06-01", "end_date": "2024-01-01", "monthly_price": 9.99, "status": "expired"},
                {"id": 4, "user_id": 4, "plan_type": "Enterprise", "start_date": "2024-04-01", "end_date": None, "monthly_price": 99.99, "status": "active"},
                {"id": 5, "user_id": 5, "plan_type": "Premium", "start_date": "2023-09-01", "end_date": "2024-03-01", "monthly_price": 29.99, "status": "cancelled"},
            ],
        },
        {
            "name": "products",
            "schemaNamespace": "public",
            "description": "Product catalog",
            "columns": [
                {"name": "id", "type": "SERIAL", "isPrimaryKey": True, "description": "Product ID"},
                {"name": "name", "type": "VARCHAR(255)", "description": "Product name"},
                {"name": "category", "type": "VARCHAR(100)", "description": "Product category"},
                {"name": "price", "type": "DECIMAL(10,2)", "description": "Unit price"},
                {"name": "stock_quantity", "type": "INTEGER", "description": "Available inventory"},
                {"name": "created_at", "type": "TIMESTAMP", "description": "When product was added"},
            ],
            "sampleRows": [
                {"id": 1, "name": "Wireless Headphones Pro", "category": "Electronics", "price": 149.99, "stock_quantity": 250, "created_at": "2024-01-10"},
                {"id": 2, "name": "Organic Cotton T-Shirt", "category": "Apparel", "price": 34.99, "stock_quantity": 500, "created_at": "2024-02-15"},
                {"id": 3, "name": "Smart Watch Series 5", "category": "Electronics", "price": 299.99, "stock_quantity": 120, "created_at": "2024-01-20"},
                {"id": 4, "name": "Premium Yoga Mat", "category": "Fitness", "price": 79.99, "stock_quantity": 300, "created_at": "2024-03-01"},
                {"id": 5, "name": "Stainless Steel Water Bottle", "category": "Accessories", "price": 24.99, "stock_quantity": 800, "created_at": "2024-02-28"},
            ],
        },
        {
            "name": "customer_metrics",
            "schemaNamespace": "analytics",
            "description": "Aggregated customer analytics",
            "columns": [
                {"name": "user_id", "type": "INTEGER", "isPrimaryKey": True, "foreignKey": "users.id", "description": "Reference to user"},
                {"name": "total_orders", "type": "INTEGER", "description": "Lifetime order count"},
                {"name": "total_spent", "type": "DECIMAL(12,2)", "description": "Lifetime spend"},
                {"name": "avg_order_value", "type": "DECIMAL(10,2)", "description": "Average order amount"},
                {"name": "customer_ltv", "type": "DECIMAL(12,2)", "description": "Customer lifetime value"},
                {"name": "loyalty_points", "type": "INTEGER", "description": "Accumulated points"},
                {"name": "customer_segment", "type": "VARCHAR(50)", "description": "Segment (VIP, Regular, New, At-Risk)"},
                {"name": "last_order_date", "type": "DATE", "description": "Most recent purchase"},
                {"name": "first_order_date", "type": "DATE", "description": "First purchase date"},
            ],
            "sampleRows": [
                {"user_id": 1, "total_orders": 12, "total_spent": 1567.89, "avg_order_value": 130.66, "customer_ltv": 2450.00, "loyalty_points": 3200, "customer_segment": "VIP", "last_order_date": "2024-09-15", "first_order_date": "2024-01-20"},
                {"user_id": 2, "total_orders": 5, "total_spent": 542.30, "avg_order_value": 108.46, "customer_ltv": 890.00, "loyalty_points": 1100, "customer_segment": "Regular", "last_order_date": "2024-08-20", "first_order_date": "2024-03-10"},
                {"user_id": 3, "total_orders": 3, "total_spent": 189.50, "avg_order_value": 63.17, "customer_ltv": 320.00, "loyalty_points": 450, "customer_segment": "At-Risk", "last_order_date": "2024-03-10", "first_order_date": "2023-08-15"},
                {"user_id": 4, "total_orders": 8, "total_spent": 1245.60, "avg_order_value": 155.70, "customer_ltv": 1980.00, "loyalty_points": 2800, "customer_segment": "VIP", "last_order_date": "2024-09-01", "first_order_date": "2024-04-05"},
                {"user_id": 5, "total_orders": 2, "total_spent": 98.50, "avg_order_value": 49.25, "customer_ltv": 150.00, "loyalty_points": 200, "customer_segment": "At-Risk", "last_order_date": "2023-11-20", "first_order_date": "2023-10-01"},
            ],
        },
        {
            "name": "payment_methods",
            "schemaNamespace": "public",
            "description": "User payment methods",
            "columns": [
                {"name": "id", "type": "SERIAL", "isPrimaryKey": True, "description": "Payment method ID"},
                {"name": "user_id", "type": "INTEGER", "foreignKey": "users.id", "description": "Reference to user"},
                {"name": "type", "type": "VARCHAR(50)", "description": "Payment type (credit_card, debit_card, paypal, apple_pay)"},
                {"name": "is_default", "type": "BOOLEAN", "description": "Is primary payment method"},
                {"name": "last_four", "type": "VARCHAR(4)", "description": "Last 4 digits of card"},
                {"name": "created_at", "type": "TIMESTAMP", "description": "When method was added"},
            ],
            "sampleRows": [
                {"id": 1, "user_id": 1, "type": "credit_card", "is_default": True, "last_four": "4242", "created_at": "2024-01-15"},
                {"id": 2, "user_id": 1, "type": "paypal", "is_default": False, "last_four": None, "created_at": "2024-02-10"},
                {"id": 3, "user_id": 2, "type": "debit_card", "is_default": True, "last_four": "1234", "created_at": "2024-03-15"},
                {"id": 4, "user_id": 3, "type": "credit_card", "is_default": True, "last_four": "5678", "created_at": "2023-06-10"},
                {"id": 5, "user_id": 4, "type": "apple_pay", "is_default": True, "last_four": None, "created_at": "2024-04-01"},
            ],
        },
        {
            "name": "addresses",
            "schemaNamespace": "public",
            "description": "User billing and shipping addresses",
            "columns": [
                {"name": "id", "type": "SERIAL", "isPrimaryKey": True, "description": "Address ID"},
                {"name": "user_id", "type": "INTEGER", "foreignKey": "users.id", "description": "Reference to user"},
                {"name": "type", "type": "VARCHAR(20)", "description": "Address type (billing, shipping)"},
                {"name": "street", "type": "VARCHAR(255)", "description": "Street address"},
                {"name": "city", "type": "VARCHAR(100)", "description": "City name"},
                {"name": "state", "type": "VARCHAR(100)", "description": "State/Province"},
                {"name": "postal_code", "type": "VARCHAR(20)", "description": "ZIP/Postal code"},
                {"name": "country", "type": "VARCHAR(100)", "description": "Country"},
            ],
            "sampleRows": [
                {"id": 1, "user_id": 1, "type": "billing", "street": "123 Main St", "city": "New York", "state": "NY", "postal_code": "10001", "country": "USA"},
                {"id": 2, "user_id": 1, "type": "shipping", "street": "456 Oak Ave", "city": "Brooklyn", "state": "NY", "postal_code": "11201", "country": "USA"},
                {"id": 3, "user_id": 2, "type": "billing", "street": "789 Pine Rd", "city": "Los Angeles", "state": "CA", "postal_code": "90001", "country": "USA"},
                {"id": 4, "user_id": 3, "type": "billing", "street": "321 Elm St", "city": "Chicago", "state": "IL", "postal_code": "60601", "country": "USA"},
                {"id": 5, "user_id": 4, "type": "shipping", "street": "654 Maple Dr", "city": "Austin", "state": "TX", "postal_code": "78701", "country": "USA"},
            ],
        },
    ]
}


def load_sample_catalog() -> Catalog:
    """데모 웨어하우스 카탈로그를 로드."""
    return Catalog.from_dict(SAMPLE_CATALOG)
