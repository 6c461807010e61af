HTML_MEDIA_TYPE = "text/html;charset=UTF-8"

# Pages are served by path alone, whatever the request method.
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
