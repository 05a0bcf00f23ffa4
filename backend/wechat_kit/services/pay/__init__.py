"""WeChat Pay unified order, JSAPI parameters and notifications."""
