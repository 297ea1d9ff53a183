from django.contrib import admin

from .models import Order, Product, ProductReview, SavedItem


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'seller', 'price', 'currency', 'stock_quantity',
                    'condition', 'status', 'is_featured', 'created_at')
    list_filter = ('status', 'is_featured', 'condition', 'currency', 'created_at')
    search_fields = ('name', 'description', 'seller__email', 'seller__username')
    readonly_fields = ('id', 'created_at', 'updated_at', 'view_count', 'approved_by', 'approved_at')

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'seller', 'name', 'description', 'condition', 'tags')
        }),
        ('Pricing & Inventory', {
            'fields': ('price', 'currency', 'stock_quantity')
        }),
        ('Moderation', {
            'fields': ('status', 'admin_notes', 'approved_by', 'approved_at')
        }),
        ('Visibility', {
            'fields': ('is_featured', 'view_count')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'buyer', 'seller', 'product', 'quantity', 'status',
                    'total_amount', 'currency', 'created_at')
    list_filter = ('status', 'payment_status', 'shipping_method', 'created_at')
    search_fields = ('id', 'buyer__email', 'seller__email', 'product__name', 'tracking_number')
    # Status only changes through the order service so the lifecycle rules hold
    readonly_fields = ('id', 'buyer', 'seller', 'product', 'quantity', 'unit_price', 'currency',
                       'shipping_cost', 'total_amount', 'status', 'cancelled_by', 'cancelled_at',
                       'cancellation_reason', 'created_at', 'updated_at')

    fieldsets = (
        ('Order Information', {
            'fields': ('id', 'buyer', 'seller', 'product', 'status')
        }),
        ('Pricing', {
            'fields': ('quantity', 'unit_price', 'currency', 'shipping_cost', 'total_amount')
        }),
        ('Payment', {
            'fields': ('payment_method', 'payment_status')
        }),
        ('Shipping', {
            'fields': ('shipping_address', 'shipping_method', 'tracking_number', 'estimated_delivery')
        }),
        ('Cancellation', {
            'fields': ('cancellation_reason', 'cancelled_by', 'cancelled_at'),
            'classes': ('collapse',)
        }),
        ('Notes', {
            'fields': ('notes',),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )


@admin.register(ProductReview)
class ProductReviewAdmin(admin.ModelAdmin):
    list_display = ('product', 'reviewer', 'rating', 'is_verified_purchase', 'helpful_count', 'created_at')
    list_filter = ('rating', 'is_verified_purchase', 'created_at')
    search_fields = ('product__name', 'reviewer__email', 'comment')
    readonly_fields = ('helpful_count', 'created_at', 'updated_at')


@admin.register(SavedItem)
class SavedItemAdmin(admin.ModelAdmin):
    list_display = ('user', 'product', 'created_at')
    search_fields = ('user__email', 'product__name')
    readonly_fields = ('created_at', 'updated_at')
